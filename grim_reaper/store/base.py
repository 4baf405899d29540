"""Abstract record store and the in-memory implementation."""

from abc import ABC, abstractmethod
from typing import Dict, List

from grim_reaper.models import PullRequestStatus, record_key
from grim_reaper.store.schemas import PullRequestRecord


class StoreError(Exception):
    """Raised when reading or writing a record fails."""

    pass


class RecordStore(ABC):
    """Key-value store of PullRequestRecord keyed by owner/repo#number."""

    @abstractmethod
    def upsert(self, record: PullRequestRecord) -> None:
        """Create or overwrite the record with the same key."""
        ...

    @abstractmethod
    def find_by_key(self, repo: str, pr_number: int) -> PullRequestRecord | None:
        """Return the record for a PR, or None if it was never tracked."""
        ...

    @abstractmethod
    def find_by_status(self, status: PullRequestStatus) -> List[PullRequestRecord]:
        """Return all records with the given status."""
        ...


class MemoryRecordStore(RecordStore):
    """Dict-backed store; records are returned in insertion order."""

    def __init__(self) -> None:
        self._records: Dict[str, PullRequestRecord] = {}

    def upsert(self, record: PullRequestRecord) -> None:
        self._records[record.key] = record.model_copy(deep=True)

    def find_by_key(self, repo: str, pr_number: int) -> PullRequestRecord | None:
        record = self._records.get(record_key(repo, pr_number))
        return record.model_copy(deep=True) if record else None

    def find_by_status(self, status: PullRequestStatus) -> List[PullRequestRecord]:
        return [r.model_copy(deep=True) for r in self._records.values() if r.status == status]

    def all(self) -> List[PullRequestRecord]:
        """All records (for inspection in tests and dry runs)."""
        return [r.model_copy(deep=True) for r in self._records.values()]


class PreviewRecordStore(MemoryRecordStore):
    """Reads through to another store; writes stay in memory.

    Used for dry runs so a preview sees the real tracking state but never
    records a warning that was not actually posted.
    """

    def __init__(self, base: RecordStore) -> None:
        super().__init__()
        self.base = base

    def find_by_key(self, repo: str, pr_number: int) -> PullRequestRecord | None:
        record = super().find_by_key(repo, pr_number)
        if record is not None:
            return record
        return self.base.find_by_key(repo, pr_number)

    def find_by_status(self, status: PullRequestStatus) -> List[PullRequestRecord]:
        records = [r for r in self.base.find_by_status(status) if r.key not in self._records]
        return records + super().find_by_status(status)
