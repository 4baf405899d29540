"""Shared fixtures: fixed clock, PR factory, mocked adapter."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from grim_reaper.adapters.base import VCSAdapter
from grim_reaper.models import PullRequest

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


class Clock:
    """Mutable clock for moving time forward inside a test."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_pr(
    number: int = 42,
    repo: str = "org/repo",
    updated_days_ago: float = 20,
    labels: list[str] | None = None,
    now: datetime = NOW,
) -> PullRequest:
    updated = now - timedelta(days=updated_days_ago)
    return PullRequest(
        id=1000 + number,
        repository=repo,
        number=number,
        title=f"PR {number}",
        url=f"https://github.com/{repo}/pull/{number}",
        created_at=updated - timedelta(days=1),
        updated_at=updated,
        inactivity_days=int(updated_days_ago),
        author="octocat",
        labels=labels or [],
    )


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def adapter() -> MagicMock:
    mock = MagicMock(spec=VCSAdapter)
    mock.list_inactive_pull_requests.return_value = []
    return mock
