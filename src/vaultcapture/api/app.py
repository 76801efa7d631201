"""FastAPI application exposing the capture endpoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vaultcapture import __version__
from vaultcapture.api.routes import capture, health
from vaultcapture.config import AppSettings
from vaultcapture.logging import get_logger
from vaultcapture.services import CaptureHandler

logger = get_logger("vaultcapture.api")


def create_app(
    settings: AppSettings, handler: CaptureHandler | None = None
) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("vaultcapture API starting up...")
        missing = settings.missing_settings()
        if missing:
            logger.warning("Missing settings: %s", ", ".join(missing))
        yield
        app.state.capture_handler.close()
        logger.info("vaultcapture API shutting down...")

    app = FastAPI(
        title="vaultcapture API",
        description="Capture raw notes into an Obsidian vault",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.capture_handler = handler or CaptureHandler(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(capture.router, prefix="/api", tags=["Capture"])
    app.include_router(health.router, prefix="/api", tags=["Health"])

    return app


def run_server(settings: AppSettings) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
