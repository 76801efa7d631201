from __future__ import annotations

import json
import random
from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from vaultcapture.config import AppSettings
from vaultcapture.github.types import CommitResult
from vaultcapture.llm.types import LLMCaptureContext, LLMCaptureResult
from vaultcapture.services import CaptureHandler

BASE_SETTINGS: dict[str, Any] = {
    "github_owner": "alice",
    "github_repo": "vault",
    "github_token": "ghp_token",
    "llm_api_key": "sk-key",
}

STRUCTURED_NOTE = {
    "frontmatter": {
        "type": "concept",
        "status": "seedling",
        "source": "[[Livre - Les mérites du dhikr]]",
        "tags": ["spiritualité"],
    },
    "title": "L'esprit & La Matière",
    "sections": [
        {"heading": "Idée centrale", "content": "Le dhikr vivifie le cœur."},
        {"heading": "Application pratique", "content": "Réciter chaque matin."},
    ],
}


class FakeLLMClient:
    """Returns `content`, or raises it when it is an exception."""

    def __init__(self, content: str | Exception) -> None:
        self.content = content
        self.contexts: list[LLMCaptureContext] = []
        self.closed = False

    def generate_note(self, context: LLMCaptureContext) -> LLMCaptureResult:
        self.contexts.append(context)
        if isinstance(self.content, Exception):
            raise self.content
        return LLMCaptureResult(content=self.content)

    def close(self) -> None:
        self.closed = True


class FakeGitHubClient:
    def __init__(self) -> None:
        self.error: Exception | None = None
        self.commits: list[tuple[str, str, str | None]] = []
        self.closed = False

    def commit_file(
        self, path: str, content: str, message: str | None = None
    ) -> CommitResult:
        if self.error is not None:
            raise self.error
        self.commits.append((path, content, message))
        return CommitResult(path=path, sha="abc123")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 5, 10, 0)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings.from_settings(BASE_SETTINGS)


@pytest.fixture
def llm_client() -> FakeLLMClient:
    return FakeLLMClient(json.dumps(STRUCTURED_NOTE, ensure_ascii=False))


@pytest.fixture
def github_client() -> FakeGitHubClient:
    return FakeGitHubClient()


@pytest.fixture
def make_handler(
    llm_client: FakeLLMClient,
    github_client: FakeGitHubClient,
    fixed_now: datetime,
) -> Callable[..., CaptureHandler]:
    """Build a handler on the fake clients; keyword arguments override settings."""

    def _make(**overrides: Any) -> CaptureHandler:
        return CaptureHandler(
            AppSettings.from_settings({**BASE_SETTINGS, **overrides}),
            llm_client=llm_client,  # type: ignore[arg-type]
            github_client=github_client,  # type: ignore[arg-type]
            clock=lambda: fixed_now,
            rng=random.Random(0),
        )

    return _make


@pytest.fixture
def handler(make_handler: Callable[..., CaptureHandler]) -> CaptureHandler:
    return make_handler()
