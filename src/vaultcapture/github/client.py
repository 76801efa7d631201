# Commits captured notes into the vault repository through the GitHub Contents API.
from __future__ import annotations

import base64
from typing import Any
from urllib.parse import quote

import httpx

from vaultcapture.errors import GitHubAPIError, GitHubError
from vaultcapture.logging import get_logger

from .types import CommitResult, GitHubClientConfig


class GitHubClient:
    """Minimal GitHub API wrapper: one file per commit, nothing else."""

    def __init__(self, config: GitHubClientConfig) -> None:
        self._config = config
        self._logger = get_logger("vaultcapture.github")
        self._http_client = httpx.Client(
            base_url=config.api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=config.timeout,
        )

    @property
    def config(self) -> GitHubClientConfig:
        return self._config

    def commit_file(
        self, path: str, content: str, message: str | None = None
    ) -> CommitResult:
        """Create `path` on the configured branch with UTF-8 `content`."""
        path = path.strip("/")
        if not path:
            raise GitHubError("Missing GitHub file path")

        payload = {
            "message": message or f"Add note {path}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self._config.branch,
        }
        url = f"/repos/{self._config.owner}/{self._config.repo}/contents/{quote(path)}"
        self._logger.debug(
            "Committing %s to %s/%s", path, self._config.owner, self._config.repo
        )
        try:
            response = self._http_client.put(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GitHubAPIError(_describe_error(exc.response)) from exc
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub request failed: {exc}") from exc

        return _build_commit_result(path, response.json())

    def close(self) -> None:
        self._http_client.close()


def _describe_error(response: httpx.Response) -> str:
    message = f"GitHub API error ({response.status_code})"
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return f"{message}: {data['message']}"
    if response.text:
        return f"{message}: {response.text}"
    return message


def _build_commit_result(path: str, data: Any) -> CommitResult:
    if not isinstance(data, dict):
        return CommitResult(path=path)
    content = data.get("content") if isinstance(data.get("content"), dict) else {}
    commit = data.get("commit") if isinstance(data.get("commit"), dict) else {}
    return CommitResult(
        path=str(content.get("path") or path),
        sha=str(commit.get("sha") or ""),
        url=str(commit.get("html_url") or ""),
    )
