"""Data models for pull requests fetched from the hosting platform."""

from datetime import datetime
from enum import Enum
from typing import List


class PullRequestStatus(str, Enum):
    """Lifecycle state of a tracked pull request.

    A PR with no stored record is ACTIVE. EXECUTED is terminal.
    """

    ACTIVE = "ACTIVE"
    WARNED = "WARNED"
    EXECUTED = "EXECUTED"
    IMMUNE = "IMMUNE"


class PullRequest:
    """Open pull request as seen at fetch time.

    inactivity_days is computed by the adapter when the PR is fetched and
    is never persisted.
    """

    def __init__(
        self,
        id: int,
        repository: str,
        number: int,
        title: str,
        url: str,
        created_at: datetime,
        updated_at: datetime,
        inactivity_days: int,
        author: str,
        labels: List[str],
    ) -> None:
        self.id = id
        self.repository = repository
        self.number = number
        self.title = title or ""
        self.url = url
        self.created_at = created_at
        self.updated_at = updated_at
        self.inactivity_days = inactivity_days
        self.author = author
        self.labels = labels or []

    @property
    def key(self) -> str:
        """Store key: owner/repo#number."""
        return record_key(self.repository, self.number)

    def __repr__(self) -> str:
        return f"PullRequest({self.key!r}, inactivity_days={self.inactivity_days})"


def record_key(repository: str, number: int) -> str:
    """Build the record key for a PR (e.g. org/repo#42)."""
    return f"{repository}#{number}"
