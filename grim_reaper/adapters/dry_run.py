"""
Dry-run adapter: reads from the wrapped adapter, logs writes instead of sending them.

Use to preview which PRs would be warned or closed before enabling the reaper.
build_service pairs it with a PreviewRecordStore so no records are written.
"""

import logging
from typing import List

from grim_reaper.adapters.base import VCSAdapter
from grim_reaper.models import PullRequest


class DryRunAdapter(VCSAdapter):
    """Delegates reads to ``inner``; comments and closures are only logged."""

    def __init__(self, inner: VCSAdapter) -> None:
        self.inner = inner
        self._log = logging.getLogger("grim_reaper.adapters.dry_run")

    def list_inactive_pull_requests(self, repositories: List[str], threshold_days: int) -> List[PullRequest]:
        return self.inner.list_inactive_pull_requests(repositories, threshold_days)

    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        return self.inner.get_pull_request(repo, pr_number)

    def post_comment(self, repo: str, pr_number: int, body: str) -> None:
        self._log.info("Dry run: would comment on %s#%s: %s", repo, pr_number, body)

    def close_pull_request(self, repo: str, pr_number: int) -> None:
        self._log.info("Dry run: would close %s#%s", repo, pr_number)
