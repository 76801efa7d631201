"""Capture handler: request body in, status code and JSON body out."""

from __future__ import annotations

import random
import threading
from collections.abc import Callable
from datetime import datetime

from vaultcapture.config import AppSettings
from vaultcapture.errors import (
    CaptureRequestError,
    MissingSettingError,
    NoteValidationError,
)
from vaultcapture.github import GitHubClient, GitHubClientConfig
from vaultcapture.llm import BaseLLMClient, LLMCaptureContext, create_llm_client
from vaultcapture.logging import get_logger
from vaultcapture.note import TransformResult, transform_capture
from vaultcapture.utils.note import normalize_markdown
from vaultcapture.validation import validate_markdown

from .types import CaptureRequest, CaptureResponse, CaptureResult

INTERNAL_ERROR = "Internal server error"


class CaptureHandler:
    """Turns one capture request into one committed note.

    Validation always runs before the commit, so a note that fails the vault
    format never reaches the repository.
    """

    def __init__(
        self,
        settings: AppSettings,
        llm_client: BaseLLMClient | None = None,
        github_client: GitHubClient | None = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self._llm_client = llm_client
        self._github_client = github_client
        self._clock = clock
        self._rng = rng
        self._client_lock = threading.Lock()
        self._logger = get_logger("vaultcapture.capture")

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def handle(self, body: str | bytes | None) -> CaptureResult:
        try:
            request = CaptureRequest.from_body(body)
            filename = self.capture(request)
        except NoteValidationError as exc:
            self._logger.warning("Capture rejected: %s", exc)
            return CaptureResult(400, CaptureResponse(success=False, error=str(exc)))
        except CaptureRequestError as exc:
            self._logger.warning("Unusable capture request: %s", exc)
            return CaptureResult(
                500, CaptureResponse(success=False, error=INTERNAL_ERROR)
            )
        except Exception:
            self._logger.exception("Capture failed")
            return CaptureResult(
                500, CaptureResponse(success=False, error=INTERNAL_ERROR)
            )
        return CaptureResult(200, CaptureResponse(success=True, filename=filename))

    def capture(self, request: CaptureRequest) -> str:
        """Run a capture end to end and return the committed filename."""
        self._ensure_configured()
        self._logger.info(
            "Capture accepted (project=%s, text=%d chars, image=%s)",
            request.project_path,
            len(request.text),
            request.image is not None,
        )

        result = self.build_note(request)
        path = self._settings.note_path(result.filename)
        self._get_github_client().commit_file(
            path, result.markdown, f"feat(capture): add {result.filename}"
        )
        self._logger.info("Committed %s", path)
        return result.filename

    def build_note(self, request: CaptureRequest) -> TransformResult:
        response_format = self._settings.response_format
        llm_result = self._get_llm_client().generate_note(
            LLMCaptureContext(
                text=request.text,
                project_path=request.project_path,
                image=request.image,
                response_format=response_format,
            )
        )
        content = normalize_markdown(llm_result.content)
        result = transform_capture(
            content, response_format, now=self._clock(), rng=self._rng
        )
        validate_markdown(result.markdown)
        return result

    def close(self) -> None:
        with self._client_lock:
            if self._llm_client is not None:
                self._llm_client.close()
            if self._github_client is not None:
                self._github_client.close()

    def _ensure_configured(self) -> None:
        missing = self._settings.missing_settings()
        if missing:
            raise MissingSettingError(missing[0])

    # handle() runs on worker threads; clients are built once under the lock.
    def _get_llm_client(self) -> BaseLLMClient:
        with self._client_lock:
            if self._llm_client is None:
                self._llm_client = create_llm_client(
                    self._settings.values, self._settings.system_prompt
                )
            return self._llm_client

    def _get_github_client(self) -> GitHubClient:
        with self._client_lock:
            if self._github_client is None:
                self._github_client = GitHubClient(
                    GitHubClientConfig.from_settings(self._settings.values)
                )
            return self._github_client
