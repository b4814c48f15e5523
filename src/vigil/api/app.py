"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from vigil.api.routes import attention, health
from vigil.core.config import AppSettings
from vigil.core.log import configure_logging
from vigil.engine.attention import create_engine
from vigil.platform.memory_backend import (
    MemoryAudioPlayer,
    MemoryNotificationPlatform,
    MemoryTitleResource,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the session engine over in-memory platform resources."""
    settings: AppSettings = getattr(app.state, "settings", None) or AppSettings()
    configure_logging(settings.log_level)

    app.state.settings = settings
    app.state.title = MemoryTitleResource(app.title)
    app.state.audio = MemoryAudioPlayer(settings.sound.asset_path, settings.sound.volume)
    app.state.notifier = MemoryNotificationPlatform()
    app.state.engine = create_engine(
        settings,
        title=app.state.title,
        audio=app.state.audio,
        notifier=app.state.notifier,
    )
    try:
        yield
    finally:
        app.state.engine.close()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Vigil",
        version="0.1.0",
        lifespan=lifespan,
    )
    if settings is not None:
        app.state.settings = settings
    app.include_router(health.router)
    app.include_router(attention.router, prefix="/attention")
    return app
