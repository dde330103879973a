"""
HTTP front end for odf-spine.

``create_app()`` is the only place a ``FastAPI`` object is built. It picks
the frame store (given, or created from ``settings.backend``), stores it
with the settings on ``app.state`` for the dependencies in
:mod:`odf_spine.api.deps`, and closes it on shutdown.

Request path through the middleware::

    BodySizeLimitMiddleware  ->  RequestIDMiddleware  ->  CORSMiddleware  ->  router

The body limit is outermost so an oversized upload is refused before any
other layer buffers it.

Tags:
    api, FastAPI, odf-spine
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from odf_spine import __version__
from odf_spine.api.deps import get_settings
from odf_spine.api.middleware.body_limit import BodySizeLimitMiddleware
from odf_spine.api.middleware.errors import unhandled_exception_handler, validation_exception_handler
from odf_spine.api.middleware.request_id import RequestIDMiddleware
from odf_spine.core.logging import get_logger
from odf_spine.core.settings import OdfSettings
from odf_spine.core.settings import get_settings as load_settings
from odf_spine.storage import create_store
from odf_spine.storage.base import FrameStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    store: FrameStore = app.state.store
    logger.info("api_starting", version=app.version, backend=store.backend, data_path=str(app.state.settings.data_path))
    try:
        yield
    finally:
        store.close()
        logger.info("api_stopped")


def _add_middleware(app: FastAPI, settings: OdfSettings) -> None:
    # Starlette runs the most recently added middleware first
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_payload_bytes)


def _add_routers(app: FastAPI, prefix: str) -> None:
    from odf_spine.api.routers import frames, health, search, subregions

    app.include_router(health.router, tags=["health"])
    for module, tag in ((frames, "frames"), (search, "search"), (subregions, "subregions")):
        app.include_router(module.router, prefix=prefix, tags=[tag])


def create_app(settings: OdfSettings | None = None, *, store: FrameStore | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Explicit settings; the cached environment settings otherwise
        store: Explicit frame store; built from ``settings.backend`` otherwise
    """
    settings = settings or load_settings()
    prefix = settings.api_prefix

    app = FastAPI(
        title="odf-spine",
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{prefix}/docs",
        openapi_url=f"{prefix}/openapi.json",
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)
    app.dependency_overrides[get_settings] = lambda: settings

    _add_middleware(app, settings)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    _add_routers(app, prefix)
    return app


__all__ = ["create_app", "lifespan"]
