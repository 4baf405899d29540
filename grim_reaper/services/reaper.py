"""Reaper engine: warn inactive PRs, then close the ones that stay inactive.

Two independent operations share one record store:

- scan_and_warn: list open PRs inactive for warning_threshold_days, post a
  warning on untracked ones and record them as WARNED.
- review_and_execute: re-fetch every WARNED PR and move it to ACTIVE
  (updated since the warning), IMMUNE (immunity label added) or EXECUTED
  (grace period over: closing comment + close).

A PR without a record is ACTIVE. Status guards make both operations safe to
repeat; nothing locks the store between them, so the last write wins.
Any adapter or store failure stops the run and propagates to the caller;
unprocessed PRs are picked up on the next scheduled run.
"""

import logging
from datetime import UTC, datetime
from typing import Callable

from grim_reaper.adapters.base import GitPlatformError, VCSAdapter
from grim_reaper.config import ReaperConfig
from grim_reaper.models import PullRequest, PullRequestStatus
from grim_reaper.store.base import RecordStore, StoreError
from grim_reaper.store.schemas import PullRequestRecord
from grim_reaper.utils import days_between, has_immunity_label, render_message

LOG = logging.getLogger("grim_reaper.services.reaper")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RunSummary:
    """Counts of what one scan or review run did."""

    def __init__(self) -> None:
        self.warned = 0
        self.immune = 0
        self.reactivated = 0
        self.executed = 0
        self.skipped = 0
        self.pending = 0

    def __repr__(self) -> str:
        return (
            f"RunSummary(warned={self.warned}, immune={self.immune}, reactivated={self.reactivated}, "
            f"executed={self.executed}, skipped={self.skipped}, pending={self.pending})"
        )


class ReaperService:
    """Computes and applies the next lifecycle transition for each PR."""

    def __init__(
        self,
        adapter: VCSAdapter,
        store: RecordStore,
        config: ReaperConfig,
        clock: Callable[[], datetime] = _utcnow,
        log: logging.Logger | None = None,
    ) -> None:
        self.adapter = adapter
        self.store = store
        self.config = config
        self._clock = clock
        self._log = log or LOG

    def scan_and_warn(self) -> RunSummary:
        """Warn every inactive, untracked PR; record immune ones."""
        summary = RunSummary()
        candidates = self.adapter.list_inactive_pull_requests(
            self.config.repositories,
            self.config.warning_threshold_days,
        )
        self._log.info(
            "Found %s PRs inactive for >= %s days",
            len(candidates),
            self.config.warning_threshold_days,
        )
        for pr in candidates:
            try:
                self._scan_one(pr, summary)
            except (GitPlatformError, StoreError):
                self._log.exception("Scan aborted at %s", pr.key)
                raise
        self._log.info("Scan finished: %s", summary)
        return summary

    def _scan_one(self, pr: PullRequest, summary: RunSummary) -> None:
        if self._is_immune(pr):
            if self._grant_immunity(pr):
                summary.immune += 1
            else:
                summary.skipped += 1
            return

        record = self.store.find_by_key(pr.repository, pr.number)
        status = record.status if record else PullRequestStatus.ACTIVE
        match status:
            case PullRequestStatus.ACTIVE:
                self._warn(pr)
                summary.warned += 1
            case PullRequestStatus.WARNED | PullRequestStatus.EXECUTED | PullRequestStatus.IMMUNE:
                self._log.debug("%s already tracked as %s, skipping", pr.key, status.value)
                summary.skipped += 1

    def review_and_execute(self) -> RunSummary:
        """Re-check every WARNED PR and reactivate, immunize or close it."""
        summary = RunSummary()
        warned = self.store.find_by_status(PullRequestStatus.WARNED)
        self._log.info("Reviewing %s warned PRs", len(warned))
        for record in warned:
            try:
                self._review_one(record, summary)
            except (GitPlatformError, StoreError):
                self._log.exception("Review aborted at %s", record.key)
                raise
        self._log.info("Review finished: %s", summary)
        return summary

    def _review_one(self, record: PullRequestRecord, summary: RunSummary) -> None:
        pr = self.adapter.get_pull_request(record.repository, record.pr_number)
        warned_at = record.warning_posted_at
        if warned_at is not None and pr.updated_at > warned_at:
            self._reactivate(record)
            summary.reactivated += 1
            return

        if self._is_immune(pr):
            if self._grant_immunity(pr):
                summary.immune += 1
            else:
                summary.skipped += 1
            return

        if warned_at is None:
            self._log.warning("%s is WARNED but has no warning_posted_at; leaving it untouched", record.key)
            summary.skipped += 1
            return

        elapsed = days_between(warned_at, self._clock())
        if elapsed >= self.config.execution_threshold_days:
            self._execute(pr, record)
            summary.executed += 1
        else:
            self._log.debug(
                "%s warned %s days ago, grace period is %s days",
                record.key,
                elapsed,
                self.config.execution_threshold_days,
            )
            summary.pending += 1

    def _is_immune(self, pr: PullRequest) -> bool:
        return has_immunity_label(pr.labels, self.config.immunity_labels)

    def _warn(self, pr: PullRequest) -> None:
        """Post the warning comment and record the PR as WARNED."""
        message = render_message(self.config.warning_message, pr.inactivity_days)
        self.adapter.post_comment(pr.repository, pr.number, message)
        now = self._clock()
        self.store.upsert(
            PullRequestRecord(
                repository=pr.repository,
                pr_number=pr.number,
                status=PullRequestStatus.WARNED,
                warning_posted_at=now,
                last_checked_at=now,
            )
        )
        self._log.info("Posted warning on %s - %r (%s days inactive)", pr.key, pr.title, pr.inactivity_days)

    def _reactivate(self, record: PullRequestRecord) -> None:
        """Activity after the warning: back to ACTIVE, no comment."""
        self.store.upsert(
            record.model_copy(
                update={
                    "status": PullRequestStatus.ACTIVE,
                    "warning_posted_at": None,
                    "last_checked_at": self._clock(),
                }
            )
        )
        self._log.info("%s was updated after the warning, marked ACTIVE", record.key)

    def _execute(self, pr: PullRequest, record: PullRequestRecord) -> None:
        """Post the closing comment, close the PR and record it as EXECUTED."""
        message = render_message(self.config.closing_message, pr.inactivity_days)
        self.adapter.post_comment(pr.repository, pr.number, message)
        self.adapter.close_pull_request(pr.repository, pr.number)
        now = self._clock()
        self.store.upsert(
            record.model_copy(
                update={
                    "status": PullRequestStatus.EXECUTED,
                    "executed_at": now,
                    "last_checked_at": now,
                }
            )
        )
        self._log.info("Closed %s - %r after %s days of inactivity", pr.key, pr.title, pr.inactivity_days)

    def _grant_immunity(self, pr: PullRequest) -> bool:
        """Move a labelled PR to IMMUNE. Returns False when nothing changed.

        A PR seen for the first time is recorded silently; a tracked PR
        (e.g. WARNED) gets the reprieve comment first.
        """
        record = self.store.find_by_key(pr.repository, pr.number)
        match record.status if record else None:
            case None:
                self.store.upsert(
                    PullRequestRecord(
                        repository=pr.repository,
                        pr_number=pr.number,
                        status=PullRequestStatus.IMMUNE,
                        last_checked_at=self._clock(),
                    )
                )
                self._log.info("%s registered as IMMUNE", pr.key)
                return True
            case PullRequestStatus.IMMUNE | PullRequestStatus.EXECUTED:
                self._log.debug("%s already %s", pr.key, record.status.value)
                return False
            case PullRequestStatus.ACTIVE | PullRequestStatus.WARNED:
                self.adapter.post_comment(pr.repository, pr.number, render_message(self.config.reprieve_message))
                self.store.upsert(
                    record.model_copy(
                        update={
                            "status": PullRequestStatus.IMMUNE,
                            "last_checked_at": self._clock(),
                        }
                    )
                )
                self._log.info("%s granted immunity (was %s)", pr.key, record.status.value)
                return True
