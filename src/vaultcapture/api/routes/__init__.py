"""API route modules."""

from vaultcapture.api.routes import capture, health

__all__ = ["capture", "health"]
