"""Service layer for vaultcapture."""

from .capture import CaptureHandler
from .types import CaptureRequest, CaptureResponse, CaptureResult

__all__ = [
    "CaptureHandler",
    "CaptureRequest",
    "CaptureResponse",
    "CaptureResult",
]
