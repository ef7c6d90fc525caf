"""FastAPI integration: background SDK generation and the documentation UI.

Usage::

    app = FastAPI(title="Todos")
    add_scalar_with_kiota(app, GenerationOptions(sdk_name="TodosClient"))
    map_scalar_with_kiota(app, "/api")

Both are inert unless the host runs in a development environment
(``APP_ENV=Development``).
"""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Sequence

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from .cache import CONFIG_FILENAME, OUTPUT_DIRNAME
from .config import environment_name, is_development, server_addresses
from .generator import OPENAPI_ROUTE, SdkGenerator
from .runner import ProcessRunner
from .schema import GenerationOptions
from .templates import render_docs_page

logger = logging.getLogger(__name__)

STATIC_PREFIX = f"/{OUTPUT_DIRNAME}"
STARTUP_TIMEOUT_S = 30.0
STARTUP_POLL_S = 0.1


async def wait_until_listening(url: str, timeout: float = STARTUP_TIMEOUT_S) -> bool:
    """Wait until something accepts TCP connections at ``url``'s host and port."""
    parsed = httpx.URL(url)
    host = parsed.host or "localhost"
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    deadline = time.monotonic() + timeout
    while True:
        try:
            _, writer = await asyncio.open_connection(host, port)
        except OSError:
            if time.monotonic() >= deadline:
                return False
            await asyncio.sleep(STARTUP_POLL_S)
            continue
        writer.close()
        await writer.wait_closed()
        return True


class SdkGenerationService:
    """Runs one generation pass in the background once the host is serving.

    The pass is fire-and-forget: its outcome only shows up in the logs and
    never affects the host's own startup.
    """

    def __init__(self, generator: SdkGenerator, environment: Optional[str] = None):
        self.generator = generator
        self.environment = environment if environment is not None else environment_name()
        self.task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if not is_development(self.environment):
            return
        self.task = asyncio.create_task(self.run_when_started())

    async def stop(self) -> None:
        self.task = None

    async def run_when_started(self) -> None:
        url = self.generator.server_url
        try:
            if not await wait_until_listening(url):
                logger.warning("Server at %s did not start listening in time", url)
            await self.generator.generate_if_needed()
        except Exception:
            logger.exception("SDK generation failed")


def add_scalar_with_kiota(
    app: FastAPI,
    options: Optional[GenerationOptions] = None,
    *,
    environment: Optional[str] = None,
    addresses: Optional[Sequence[str]] = None,
    content_root: Optional[str] = None,
    runner: Optional[ProcessRunner] = None,
) -> SdkGenerationService:
    """Register background SDK generation with ``app``'s lifespan."""
    options = options or GenerationOptions()
    generator = SdkGenerator(
        options,
        content_root=content_root,
        addresses=addresses if addresses is not None else server_addresses(),
        runner=runner,
    )
    service = SdkGenerationService(generator, environment)
    app.state.scalar_kiota_options = options
    app.state.scalar_kiota_service = service

    inner = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(a):
        async with inner(a) as state:
            await service.start()
            try:
                yield state
            finally:
                await service.stop()

    app.router.lifespan_context = lifespan
    return service


def _has_route(app: FastAPI, path: str) -> bool:
    return any(getattr(r, "path", None) == path for r in app.router.routes)


def map_scalar_with_kiota(app: FastAPI, pattern: str = "/api", *, environment: Optional[str] = None) -> FastAPI:
    """Serve the documentation UI at ``pattern`` and redirect ``/`` to it.

    Outside development nothing is registered.
    """
    service: Optional[SdkGenerationService] = getattr(app.state, "scalar_kiota_service", None)
    if environment is None:
        environment = service.environment if service else environment_name()
    if not is_development(environment):
        return app

    options: GenerationOptions = getattr(app.state, "scalar_kiota_options", None) or GenerationOptions()
    if service is not None:
        root = service.generator.root_path
    else:
        root = SdkGenerator(options).root_path
    Path(root).mkdir(parents=True, exist_ok=True)

    if not _has_route(app, OPENAPI_ROUTE):
        async def openapi_document() -> JSONResponse:
            return JSONResponse(app.openapi())

        app.add_api_route(OPENAPI_ROUTE, openapi_document, methods=["GET"], include_in_schema=False)

    app.mount(STATIC_PREFIX, StaticFiles(directory=str(root), check_dir=False), name="scalar-kiota")

    title = options.title if options.title is not None else f"{app.title} API"
    page = render_docs_page(
        title=title,
        theme=options.theme.value,
        spec_url=OPENAPI_ROUTE,
        config_url=f"{STATIC_PREFIX}/{CONFIG_FILENAME}",
    )

    async def documentation() -> HTMLResponse:
        return HTMLResponse(page)

    app.add_api_route(pattern, documentation, methods=["GET"], include_in_schema=False)

    async def redirect_root(request: Request, call_next):
        if request.url.path == "/":
            return RedirectResponse(pattern, status_code=302)
        return await call_next(request)

    app.middleware("http")(redirect_root)
    return app


__all__ = [
    "SdkGenerationService",
    "add_scalar_with_kiota",
    "map_scalar_with_kiota",
    "wait_until_listening",
]
