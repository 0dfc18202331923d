from website.markdown import render


def test_render__common_syntax() -> None:
    html = render(
        "# Title\n\n"
        "Some *emphasis* and **strong** text with a [link](https://example.com).\n\n"
        "- one\n- two\n\n"
        "1. first\n\n"
        "> quoted\n\n"
        "    indented code\n"
    )

    assert "<h1>Title</h1>" in html
    assert "<em>emphasis</em>" in html
    assert "<strong>strong</strong>" in html
    assert '<a href="https://example.com">link</a>' in html
    assert "<li>one</li>" in html
    assert "<ol>" in html
    assert "<blockquote>" in html
    assert "<pre><code>indented code\n</code></pre>" in html


def test_render__accepts_bytes() -> None:
    assert render(b"*hi*") == render("*hi*")


def test_render__is_deterministic() -> None:
    source = "# Post\n\n```python\ndef f():\n    return 1\n```\n\nText <b>bold</b>\n"

    assert render(source) == render(source)


def test_render__highlights_known_languages() -> None:
    html = render("```python\ndef f():\n    pass\n```\n")

    assert '<div class="highlight">' in html
    assert '<span class="k">def</span>' in html


def test_render__unknown_language_is_escaped() -> None:
    html = render("```notalanguage\n<b>x</b>\n```\n")

    assert "<pre><code>&lt;b&gt;x&lt;/b&gt;\n</code></pre>" in html


def test_render__strips_unsafe_html() -> None:
    html = render(
        "<script>alert(1)</script>\n\n"
        '<a href="javascript:alert(1)" onclick="x()">click</a>\n'
    )

    assert "<script" not in html
    assert "javascript:" not in html
    assert "onclick" not in html
