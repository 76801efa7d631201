"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter, Request

from vaultcapture import __version__
from vaultcapture.config import AppSettings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Report whether the service has everything it needs to capture notes.

    Returns:
        dict with status, version and the names of missing settings
    """
    settings: AppSettings = request.app.state.settings
    missing = settings.missing_settings()
    return {
        "status": "ok" if not missing else "degraded",
        "version": __version__,
        "missing_settings": missing,
    }
