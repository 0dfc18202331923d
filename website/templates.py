from pathlib import Path
from typing import Any

import jinja2
from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.templating import _TemplateResponse as TemplateResponse

from website.config import Config
from website.feeds import canonical_url
from website.markdown import HIGHLIGHT_CSS

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def build_templates(config: Config) -> Jinja2Templates:
    # Templates from the site directory override the bundled ones
    directories = [_TEMPLATES_DIR]
    if config.templates_dir:
        directories.insert(0, config.resolve(config.templates_dir))

    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(directories),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals["canonical_url"] = canonical_url
    return Jinja2Templates(env=env)


def render_template(
    request: Request,
    template: str,
    template_args: dict[str, Any] | None = None,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> TemplateResponse:
    if template_args is None:
        template_args = {}

    site = request.app.state.site
    templates: Jinja2Templates = request.app.state.templates

    return templates.TemplateResponse(
        request,
        template,
        {
            "site": site,
            "config": site.config,
            "t": site.locale.value,
            "highlight_css": HIGHLIGHT_CSS,
            **template_args,
        },
        status_code=status_code,
        headers=headers,
    )
