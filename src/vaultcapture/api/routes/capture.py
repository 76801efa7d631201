"""Capture endpoint."""

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from vaultcapture.services import CaptureHandler

router = APIRouter()


@router.post("/capture")
async def capture(request: Request) -> JSONResponse:
    """
    Structure a raw capture with the language model and commit it to the vault.

    The body is read raw so that malformed JSON gets the same `{"success":
    false, "error": ...}` shape as every other failure.
    """
    handler: CaptureHandler = request.app.state.capture_handler
    body = await request.body()
    result = await run_in_threadpool(handler.handle, body)
    return JSONResponse(status_code=result.status_code, content=result.body)
