"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from grim_reaper.models import PullRequest


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class VCSAdapter(ABC):
    """Abstract interface for the hosting platform the reaper talks to."""

    @abstractmethod
    def list_inactive_pull_requests(self, repositories: List[str], threshold_days: int) -> List[PullRequest]:
        """List open PRs inactive for at least threshold_days.

        An empty repositories list means every repository the credential
        can access.
        """
        ...

    @abstractmethod
    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        """Fetch a PR by number (never cached)."""
        ...

    @abstractmethod
    def post_comment(self, repo: str, pr_number: int, body: str) -> None:
        """Post a comment on a PR."""
        ...

    @abstractmethod
    def close_pull_request(self, repo: str, pr_number: int) -> None:
        """Close a PR without merging."""
        ...
