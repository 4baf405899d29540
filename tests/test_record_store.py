"""Tests for record stores (YAML files and in-memory) and the record schema."""

from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from grim_reaper.models import PullRequestStatus
from grim_reaper.store import MemoryRecordStore, PreviewRecordStore, PullRequestRecord, StoreError, YamlRecordStore

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _record(number: int = 42, status: PullRequestStatus = PullRequestStatus.WARNED, repo: str = "org/repo"):
    return PullRequestRecord(
        repository=repo,
        pr_number=number,
        status=status,
        warning_posted_at=NOW if status == PullRequestStatus.WARNED else None,
        last_checked_at=NOW,
    )


class TestSchema:
    """PullRequestRecord validation."""

    def test_key_is_repo_hash_number(self) -> None:
        """Key combines repository and number."""
        assert _record().key == "org/repo#42"

    def test_status_from_string(self) -> None:
        """Status strings validate into the enum."""
        record = PullRequestRecord.model_validate(
            {"repository": "o/r", "pr_number": 1, "status": "IMMUNE", "last_checked_at": "2025-03-01T12:00:00Z"}
        )
        assert record.status is PullRequestStatus.IMMUNE
        assert record.last_checked_at == NOW

    def test_unknown_status_rejected(self) -> None:
        """Statuses outside the enum are invalid."""
        with pytest.raises(ValidationError):
            PullRequestRecord.model_validate(
                {"repository": "o/r", "pr_number": 1, "status": "CLOSED", "last_checked_at": "2025-03-01T12:00:00Z"}
            )

    def test_naive_timestamp_is_utc(self) -> None:
        """Timestamps without offset are read as UTC."""
        record = PullRequestRecord.model_validate(
            {"repository": "o/r", "pr_number": 1, "status": "ACTIVE", "last_checked_at": "2025-03-01T12:00:00"}
        )
        assert record.last_checked_at == NOW

    def test_extra_fields_forbidden(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValidationError):
            PullRequestRecord.model_validate(
                {
                    "repository": "o/r",
                    "pr_number": 1,
                    "status": "ACTIVE",
                    "last_checked_at": "2025-03-01T12:00:00Z",
                    "owner": "x",
                }
            )


class TestYamlRecordStore:
    """YamlRecordStore: one YAML file per record."""

    def test_upsert_writes_yaml(self, tmp_path: Path) -> None:
        """Upsert writes {root}/{owner}/{repo}/{n}.yaml with status and timestamps."""
        store = YamlRecordStore(tmp_path)
        store.upsert(_record())
        path = tmp_path / "org" / "repo" / "42.yaml"
        assert path.is_file()
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["status"] == "WARNED"
        assert data["repository"] == "org/repo"
        assert data["pr_number"] == 42
        assert "executed_at" not in data

    def test_find_by_key_roundtrip(self, tmp_path: Path) -> None:
        """A saved record loads back equal."""
        store = YamlRecordStore(tmp_path)
        record = _record()
        store.upsert(record)
        assert store.find_by_key("org/repo", 42) == record

    def test_find_by_key_missing_returns_none(self, tmp_path: Path) -> None:
        """Missing record means the PR was never tracked."""
        assert YamlRecordStore(tmp_path).find_by_key("org/repo", 1) is None

    def test_upsert_overwrites(self, tmp_path: Path) -> None:
        """A second upsert for the same key replaces the first."""
        store = YamlRecordStore(tmp_path)
        store.upsert(_record())
        store.upsert(_record(status=PullRequestStatus.IMMUNE))
        found = store.find_by_key("org/repo", 42)
        assert found.status == PullRequestStatus.IMMUNE
        assert found.warning_posted_at is None

    def test_find_by_status_filters(self, tmp_path: Path) -> None:
        """Only records with the requested status are returned, in path order."""
        store = YamlRecordStore(tmp_path)
        store.upsert(_record(2, repo="org/b"))
        store.upsert(_record(1, repo="org/a"))
        store.upsert(_record(3, status=PullRequestStatus.IMMUNE))
        warned = store.find_by_status(PullRequestStatus.WARNED)
        assert [r.key for r in warned] == ["org/a#1", "org/b#2"]
        assert store.find_by_status(PullRequestStatus.EXECUTED) == []

    def test_find_by_status_missing_root(self, tmp_path: Path) -> None:
        """A store directory that does not exist yet is empty."""
        assert YamlRecordStore(tmp_path / "nope").find_by_status(PullRequestStatus.WARNED) == []

    def test_find_by_status_ignores_non_numeric_files(self, tmp_path: Path) -> None:
        """Files whose stem is not a PR number are skipped."""
        store = YamlRecordStore(tmp_path)
        store.upsert(_record())
        (tmp_path / "org" / "repo" / "notes.yaml").write_text("hello: world\n", encoding="utf-8")
        assert len(store.find_by_status(PullRequestStatus.WARNED)) == 1

    def test_invalid_yaml_raises_store_error(self, tmp_path: Path) -> None:
        """Corrupt files raise StoreError instead of looking untracked."""
        path = tmp_path / "org" / "repo"
        path.mkdir(parents=True)
        (path / "11.yaml").write_text("not: valid: yaml: [[[", encoding="utf-8")
        with pytest.raises(StoreError):
            YamlRecordStore(tmp_path).find_by_key("org/repo", 11)

    def test_empty_file_raises_store_error(self, tmp_path: Path) -> None:
        """Empty record files raise StoreError."""
        path = tmp_path / "org" / "repo"
        path.mkdir(parents=True)
        (path / "12.yaml").write_text("", encoding="utf-8")
        with pytest.raises(StoreError):
            YamlRecordStore(tmp_path).find_by_status(PullRequestStatus.WARNED)

    def test_invalid_repository_name(self, tmp_path: Path) -> None:
        """Repository must be owner/repo."""
        with pytest.raises(StoreError, match="owner/repo"):
            YamlRecordStore(tmp_path).find_by_key("just-a-name", 1)

    def test_write_failure_raises_store_error(self, tmp_path: Path) -> None:
        """An unwritable root surfaces as StoreError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(StoreError):
            YamlRecordStore(blocker).upsert(_record())


class TestMemoryRecordStore:
    """MemoryRecordStore: dict-backed, insertion ordered."""

    def test_roundtrip_and_order(self) -> None:
        """Records come back equal and in insertion order."""
        store = MemoryRecordStore()
        store.upsert(_record(2))
        store.upsert(_record(1))
        assert [r.pr_number for r in store.find_by_status(PullRequestStatus.WARNED)] == [2, 1]
        assert store.find_by_key("org/repo", 1) == _record(1)

    def test_returns_copies(self) -> None:
        """Mutating a returned record does not change the stored one."""
        store = MemoryRecordStore()
        store.upsert(_record())
        found = store.find_by_key("org/repo", 42)
        found.status = PullRequestStatus.EXECUTED
        assert store.find_by_key("org/repo", 42).status == PullRequestStatus.WARNED


class TestPreviewRecordStore:
    """PreviewRecordStore: reads the base store, keeps writes in memory."""

    def test_reads_base_records(self, tmp_path: Path) -> None:
        """Records already on disk are visible."""
        base = YamlRecordStore(tmp_path)
        base.upsert(_record(7))
        store = PreviewRecordStore(base)
        assert store.find_by_key("org/repo", 7) == _record(7)
        assert [r.pr_number for r in store.find_by_status(PullRequestStatus.WARNED)] == [7]

    def test_writes_never_reach_base(self, tmp_path: Path) -> None:
        """Upserts shadow the base record and leave the files alone."""
        base = YamlRecordStore(tmp_path)
        base.upsert(_record(7))
        store = PreviewRecordStore(base)

        store.upsert(_record(7, status=PullRequestStatus.EXECUTED))
        store.upsert(_record(8))

        assert store.find_by_key("org/repo", 7).status == PullRequestStatus.EXECUTED
        assert [r.pr_number for r in store.find_by_status(PullRequestStatus.WARNED)] == [8]
        assert base.find_by_key("org/repo", 7).status == PullRequestStatus.WARNED
        assert base.find_by_key("org/repo", 8) is None
