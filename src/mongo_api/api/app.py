"""
mongo_api.api.app

FastAPI app factory.

Responsibilities:
- Build the FastAPI application and register middleware, routers and the static mount.
- Dispose shared infrastructure (MongoDB client) on shutdown.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mongo_api import __version__
from mongo_api.api.middleware import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from mongo_api.api.routers.assets import router as assets_router
from mongo_api.api.routers.health import router as health_router
from mongo_api.observability.logging import configure_logging, get_logger
from mongo_api.observability.middleware import RequestContextMiddleware
from mongo_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        fmt=settings.log_format,
        cache_loggers=settings.env != "test",
    )

    app = FastAPI(
        title="Mongo API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Populated by the startup sequencer once the storage connection succeeds.
    app.state.mongo_client = None

    # Starlette runs the last-added middleware first, so this list reads inside-out.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.body_limit_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SecurityHeadersMiddleware,
        content_security_policy=settings.content_security_policy,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(assets_router)

    settings.static_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.static_mount_path,
        StaticFiles(directory=settings.static_dir),
        name="assets",
    )

    return app


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Shutdown: close the client the startup sequencer attached, if any.
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        await client.close()
        app.state.mongo_client = None
    log.info("shutdown")


# --- Module Notes -----------------------------------------------------------
# Storage is not connected here: `mongo_api.startup` owns the
# connect-then-listen ordering and attaches the client to `app.state`.
