from .client import GitHubClient
from .types import CommitResult, GitHubClientConfig

__all__ = ["CommitResult", "GitHubClient", "GitHubClientConfig"]
