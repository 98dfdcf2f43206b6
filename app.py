import asyncio
import logging
import os
import stat
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from component_handlers import header_component
from component_registry import ComponentRegistry
from config import Settings, configure_logging
from showcase import render_showcase


logger = logging.getLogger("showcase")

INDEX_FALLBACK = (
    "<!DOCTYPE html>"
    "<html><head><title>500</title></head>"
    "<body><h1>500 Internal Server Error</h1>"
    "<p>Unable to load index page.</p></body></html>"
)


def build_registry(settings: Settings) -> ComponentRegistry:
    registry = ComponentRegistry(settings.components_dir)
    registry.register(header_component(settings.components_dir))
    for name in settings.static_components:
        registry.register_static(os.path.join(settings.components_dir, name))
    return registry


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    registry = build_registry(settings)

    app = FastAPI(title="Showcase", version="0.1")
    app.state.settings = settings
    app.state.registry = registry

    logger.info("Components initialized with %d handler(s): %s", len(registry), ", ".join(registry.names()))

    # Static assets live outside the core
    app.mount("/static", StaticFiles(directory=settings.static_dir, check_dir=False), name="static")

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error for %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.get("/")
    async def home():
        try:
            st = await asyncio.to_thread(os.stat, settings.index_path)
        except OSError as e:
            logger.error("Error loading %s: %s", settings.index_path, e)
            return HTMLResponse(INDEX_FALLBACK)
        if not stat.S_ISREG(st.st_mode):
            logger.error("Error loading %s: not a regular file", settings.index_path)
            return HTMLResponse(INDEX_FALLBACK)
        return FileResponse(settings.index_path, media_type="text/html", stat_result=st)

    @app.get("/helloworld")
    def hello_world():
        return PlainTextResponse("Hello, world!\n")

    components_prefix = settings.components_prefix

    @app.api_route(components_prefix, methods=["GET", "POST"])
    @app.api_route(components_prefix + "/{sub_path:path}", methods=["GET", "POST"])
    async def components(request: Request) -> Response:
        sub_path = request.path_params.get("sub_path", "")
        body = await request.body() if request.method == "POST" else b""
        return await registry.dispatch(sub_path, request.method, body, request.url.query)

    showcase_prefix = settings.showcase_prefix

    @app.get(showcase_prefix)
    @app.get(showcase_prefix + "/{rest:path}")
    async def projects(request: Request) -> Response:
        return await render_showcase(request.url.path, settings)

    return app


configure_logging(os.getenv("LOG_LEVEL", "INFO"))
app = create_app()
