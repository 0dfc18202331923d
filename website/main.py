import base64
import hashlib
import os
import sys
import time

import uvicorn
from asgiref.typing import ASGI3Application
from asgiref.typing import ASGIReceiveCallable
from asgiref.typing import ASGISendCallable
from asgiref.typing import Scope
from fastapi import APIRouter
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.datastructures import Headers
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Message

from website import templates
from website.config import Config
from website.config import load_config
from website.errors import BuildError
from website.errors import PostNotFoundError
from website.feeds import ATOM_CONTENT_TYPE
from website.feeds import JSON_FEED_CONTENT_TYPE
from website.feeds import RSS_CONTENT_TYPE
from website.markdown import HIGHLIGHT_CSS
from website.site import Site
from website.site import build

HIGHLIGHT_CSS_HASH = base64.b64encode(
    hashlib.sha256(HIGHLIGHT_CSS.encode()).digest()
).decode()


class CustomMiddleware:
    """Raw ASGI middleware logging every request with a request ID."""

    def __init__(
        self,
        app: ASGI3Application,
        debug: bool = False,
    ) -> None:
        self.app = app
        self.debug = debug

    async def __call__(
        self, scope: Scope, receive: ASGIReceiveCallable, send: ASGISendCallable
    ) -> None:
        # We only care about HTTP requests
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_details = {"status_code": None}
        start_time = time.perf_counter()
        request_id = os.urandom(8).hex()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_details["status_code"] = message["status"]

                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id
                headers["referrer-policy"] = (
                    "no-referrer, strict-origin-when-cross-origin"
                )
                headers["x-content-type-options"] = "nosniff"
                headers["x-frame-options"] = "DENY"
                headers["content-security-policy"] = (
                    f"default-src 'self'; "
                    f"style-src 'self' 'sha256-{HIGHLIGHT_CSS_HASH}'; "
                    f"frame-ancestors 'none'; base-uri 'self';"
                )
                if not self.debug:
                    headers["strict-transport-security"] = "max-age=63072000;"

            await send(message)  # type: ignore

        with logger.contextualize(request_id=request_id):
            client_host, client_port = scope["client"] or ("-", 0)  # type: ignore
            request_path = scope["path"]
            headers = Headers(raw=scope["headers"])  # type: ignore
            user_agent = headers.get("user-agent")
            logger.info(
                f"{client_host}:{client_port} - "
                f"{scope['method']} {request_path} - "
                f'"{user_agent}"'
            )
            try:
                await self.app(scope, receive, send_wrapper)  # type: ignore
            finally:
                elapsed_time = time.perf_counter() - start_time
                logger.info(
                    f"status_code={response_details['status_code']} "
                    f"{elapsed_time=:.2f}s"
                )


def configure_logging(debug: bool = False) -> None:
    logger.configure(extra={"request_id": "no_req_id"})
    logger.remove()
    logger_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "{extra[request_id]} - <level>{message}</level>"
    )
    logger.add(sys.stdout, format=logger_format, level="DEBUG" if debug else "INFO")


def get_site(request: Request) -> Site:
    return request.app.state.site


router = APIRouter()


@router.get("/")
def index(request: Request, site: Site = Depends(get_site)) -> Response:
    return templates.render_template(
        request, "index.html", {"latest": site.posts.latest}
    )


@router.get("/blog")
def blog_index(request: Request, site: Site = Depends(get_site)) -> Response:
    return templates.render_template(request, "blogindex.html", {"posts": site.posts})


@router.get("/resume")
def resume(request: Request, site: Site = Depends(get_site)) -> Response:
    return templates.render_template(request, "resume.html", {"resume": site.resume})


@router.get("/contact")
def contact(request: Request) -> Response:
    return templates.render_template(request, "contact.html")


@router.get("/blog.rss")
def rss_feed(site: Site = Depends(get_site)) -> Response:
    return Response(site.feeds.rss, media_type=RSS_CONTENT_TYPE)


@router.get("/blog.atom")
def atom_feed(site: Site = Depends(get_site)) -> Response:
    return Response(site.feeds.atom, media_type=ATOM_CONTENT_TYPE)


@router.get("/blog.json")
def json_feed(site: Site = Depends(get_site)) -> Response:
    return Response(site.feeds.json, media_type=JSON_FEED_CONTENT_TYPE)


@router.get("/sw.js")
def service_worker(site: Site = Depends(get_site)) -> FileResponse:
    path = site.config.resolve(site.config.static_dir) / "js" / "sw.js"
    if not path.is_file():
        raise HTTPException(status_code=404)
    return FileResponse(path, media_type="application/javascript")


def show_post(
    link: str,
    request: Request,
    site: Site = Depends(get_site),
) -> Response:
    try:
        post = site.posts.get(link.strip("/"))
    except PostNotFoundError:
        raise HTTPException(status_code=404)

    return templates.render_template(request, "blogpost.html", {"post": post})


async def custom_http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> Response:
    accept_value = request.headers.get("accept")
    if (
        accept_value
        and accept_value.startswith("text/html")
        and 400 <= exc.status_code < 600
    ):
        title = (
            {
                404: "Oops, nothing to see here",
                500: "Oops, something went wrong",
            }
        ).get(exc.status_code, exc.detail)
        return templates.render_template(
            request,
            "error.html",
            {"title": title},
            status_code=exc.status_code,
        )
    return await http_exception_handler(request, exc)


def create_app(site: Site) -> FastAPI:
    """Serve an already built site, the snapshot is never modified."""
    config = site.config
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.site = site
    app.state.templates = templates.build_templates(config)

    app.include_router(router)
    for prefix, directory in [
        ("/static", config.resolve(config.static_dir)),
        ("/css", config.resolve(config.css_dir)),
    ]:
        if directory.is_dir():
            app.mount(prefix, StaticFiles(directory=directory), name=prefix[1:])

    # Registered last, post links live at the root of the URL space
    app.add_api_route("/{link:path}", show_post, methods=["GET"])
    app.add_exception_handler(StarletteHTTPException, custom_http_exception_handler)
    app.add_middleware(CustomMiddleware, debug=config.debug)
    return app


def build_or_exit(config: Config | None = None) -> Site:
    """Build the site, exiting the process before it listens if that fails."""
    try:
        config = config or load_config()
        configure_logging(config.debug)
        return build(config)
    except BuildError:
        logger.exception("Failed to build the site")
        sys.exit(1)


def run(config: Config | None = None) -> None:
    site = build_or_exit(config)
    config = site.config
    logger.info(f"Listening on port {config.port}")
    uvicorn.run(create_app(site), host="0.0.0.0", port=config.port, log_config=None)


if __name__ == "__main__":
    run()
