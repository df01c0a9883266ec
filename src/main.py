"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from src.api import auth, pages, sensor_data
from src.config import Settings, get_settings
from src.database import Database
from src.errors import register_error_handlers
from src.services.auth import TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    settings: Settings = app.state.settings
    if settings.create_schema_on_startup:
        app.state.database.create_all()
    logger.info(f"Telemetry backend started ({settings.environment})")
    yield
    app.state.database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Missing required configuration raises here, before anything is served.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Sensor Telemetry API",
        description="Accounts and temperature/humidity readings for IoT devices",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.token_service = TokenService.from_settings(settings)

    register_error_handlers(app)

    # Register routers
    app.include_router(auth.router)
    app.include_router(sensor_data.router)
    app.include_router(pages.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "environment": settings.environment}

    return app


def configure_logging(level: str) -> None:
    """Send log records to stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def run() -> None:
    """Console entry point: load settings, then serve."""
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging("INFO")
        logger.critical(f"Invalid configuration, refusing to start: {e}")
        sys.exit(1)
    configure_logging(settings.log_level)
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host="0.0.0.0",  # noqa: S104
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
