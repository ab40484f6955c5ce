"""Web catalog API application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..container import ServiceContext
from ..core.config import get_settings
from ..core.logging import setup_logging
from .routes import create_api_routes

logger = logging.getLogger(__name__)


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    """Create FastAPI application.

    With ``context`` given (tests, embedding) the app uses it as is and
    leaves closing it to the owner.
    """
    settings = context.settings if context else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_context = context is None

        if owns_context:
            setup_logging(settings.log_level, settings.log_json)
            logger.info("🚀 Starting Smart Clinic API...")
            app.state.context = await ServiceContext.create(settings)
        else:
            app.state.context = context

        health = await app.state.context.health_check()
        logger.info(f"📊 System health: {health}")

        yield

        if owns_context:
            logger.info("🛑 Shutting down Smart Clinic API...")
            await app.state.context.close()
            logger.info("✅ Shutdown completed")

    app = FastAPI(
        title="Smart Clinic API",
        description="Web catalog backend of the Smart Clinic bot",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan
    )

    if context is not None:
        app.state.context = context

    create_api_routes(app)

    return app


def run():
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "smart_clinic_bot.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run()
