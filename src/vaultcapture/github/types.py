from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from vaultcapture.errors import MissingSettingError

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class GitHubClientConfig:
    owner: str
    repo: str
    token: str
    branch: str = "main"
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Mapping[str, object]) -> GitHubClientConfig:
        values: dict[str, str] = {}
        for key in ("github_owner", "github_repo", "github_token"):
            value = str(settings.get(key) or "").strip()
            if not value:
                raise MissingSettingError(key)
            values[key] = value
        return cls(
            owner=values["github_owner"],
            repo=values["github_repo"],
            token=values["github_token"],
            branch=str(settings.get("github_branch") or "main").strip() or "main",
            api_url=str(settings.get("github_api_url") or DEFAULT_API_URL),
        )


@dataclass(frozen=True, slots=True)
class CommitResult:
    path: str
    sha: str = ""
    url: str = ""
