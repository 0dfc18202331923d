"""Markdown to HTML, shared by blog posts and the resume.

The output is sanitized here and nowhere else: templates render it as-is.
"""
import html
from typing import Callable

import bleach
from mistletoe import Document  # type: ignore
from mistletoe.block_token import BlockCode  # type: ignore
from mistletoe.block_token import CodeFence  # type: ignore
from mistletoe.html_renderer import HTMLRenderer  # type: ignore
from pygments import highlight  # type: ignore
from pygments.formatters import HtmlFormatter  # type: ignore
from pygments.lexers import get_lexer_by_name as get_lexer  # type: ignore
from pygments.util import ClassNotFound  # type: ignore

CODE_HIGHLIGHTING_THEME = "friendly_grayscale"

_FORMATTER = HtmlFormatter(style=CODE_HIGHLIGHTING_THEME)

HIGHLIGHT_CSS = _FORMATTER.get_style_defs(".highlight")

ALLOWED_TAGS = [
    "a",
    "abbr",
    "acronym",
    "b",
    "br",
    "blockquote",
    "code",
    "pre",
    "em",
    "i",
    "li",
    "ol",
    "strong",
    "sup",
    "sub",
    "del",
    "ul",
    "span",
    "div",
    "p",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "table",
    "th",
    "tr",
    "td",
    "thead",
    "tbody",
    "tfoot",
    "caption",
    "img",
]

ALLOWED_CSS_CLASSES = {
    "highlight",
    "hll",
    "c",
    "err",
    "g",
    "k",
    "l",
    "n",
    "o",
    "x",
    "p",
    "ch",
    "cm",
    "cp",
    "cpf",
    "c1",
    "cs",
    "gd",
    "ge",
    "gr",
    "gh",
    "gi",
    "go",
    "gp",
    "gs",
    "gu",
    "gt",
    "kc",
    "kd",
    "kn",
    "kp",
    "kr",
    "kt",
    "ld",
    "m",
    "s",
    "na",
    "nb",
    "nc",
    "no",
    "nd",
    "ni",
    "ne",
    "nf",
    "nl",
    "nn",
    "nx",
    "py",
    "nt",
    "nv",
    "ow",
    "w",
    "mb",
    "mf",
    "mh",
    "mi",
    "mo",
    "sa",
    "sb",
    "sc",
    "dl",
    "sd",
    "s2",
    "se",
    "sh",
    "si",
    "sx",
    "sr",
    "s1",
    "ss",
    "bp",
    "fm",
    "vc",
    "vg",
    "vi",
    "vm",
    "il",
}


def _allow_class(_tag: str, name: str, value: str) -> bool:
    return name == "class" and value in ALLOWED_CSS_CLASSES


def _allow_code_attrs(_tag: str, name: str, value: str) -> bool:
    return name == "class" and value.startswith("language-")


def _allow_cell_attrs(_tag: str, name: str, value: str) -> bool:
    return name == "align" and value in {"left", "center", "right"}


ALLOWED_ATTRIBUTES: dict[str, list[str] | Callable[[str, str, str], bool]] = {
    "a": ["href", "title"],
    "abbr": ["title"],
    "acronym": ["title"],
    "img": ["src", "alt", "title"],
    "ol": ["start"],
    "div": _allow_class,
    "span": _allow_class,
    "code": _allow_code_attrs,
    "th": _allow_cell_attrs,
    "td": _allow_cell_attrs,
}


class CustomRenderer(HTMLRenderer):
    def render_block_code(self, token: BlockCode | CodeFence) -> str:
        code = token.children[0].content if token.children else ""
        language = getattr(token, "language", "")
        if language:
            try:
                lexer = get_lexer(language)
            except ClassNotFound:
                pass
            else:
                return highlight(code, lexer, _FORMATTER)

        return f"<pre><code>{html.escape(code)}</code></pre>\n"


def _clean_html(rendered: str) -> str:
    return bleach.clean(
        rendered,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=["http", "https", "mailto"],
        strip=True,
    )


def render(source: str | bytes) -> str:
    """Render markdown to sanitized HTML.

    >>> render("*hi*")
    '<p><em>hi</em></p>\\n'
    """
    if isinstance(source, bytes):
        source = source.decode("utf-8")

    with CustomRenderer() as renderer:
        rendered = renderer.render(Document(source))

    return _clean_html(rendered)
