"""Record storage as YAML files.

One file per PR: {root}/{owner}/{repo}/{pr_number}.yaml. Records are
overwritten in place; lookups by status scan all files.
"""

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from grim_reaper.models import PullRequestStatus
from grim_reaper.store.base import RecordStore, StoreError
from grim_reaper.store.schemas import PullRequestRecord

LOG = logging.getLogger("grim_reaper.store.yaml_store")


class YamlRecordStore(RecordStore):
    """RecordStore backed by a directory of YAML files."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _record_path(self, repo: str, pr_number: int) -> Path:
        owner, sep, name = repo.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise StoreError(f"Invalid repository name: {repo!r} (expected owner/repo)")
        return self.root / owner / name / f"{pr_number}.yaml"

    def _load(self, path: Path) -> PullRequestRecord:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            if not data:
                raise StoreError(f"Empty record file: {path}")
            return PullRequestRecord.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise StoreError(f"Failed to load record {path}: {e}") from e

    def upsert(self, record: PullRequestRecord) -> None:
        """Write record to its YAML file. Creates dirs if needed."""
        path = self._record_path(record.repository, record.pr_number)
        payload = record.model_dump(mode="json", exclude_none=True)
        raw = yaml.dump(
            payload,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=1000,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(raw, encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to save record {record.key}: {e}") from e
        LOG.debug("Saved %s (%s) to %s", record.key, record.status.value, path)

    def find_by_key(self, repo: str, pr_number: int) -> PullRequestRecord | None:
        """Load the record for a PR. Returns None if the file is missing."""
        path = self._record_path(repo, pr_number)
        if not path.is_file():
            return None
        return self._load(path)

    def find_by_status(self, status: PullRequestStatus) -> List[PullRequestRecord]:
        """All records with the given status, in sorted path order."""
        if not self.root.is_dir():
            return []
        out = []
        for f in sorted(self.root.glob("*/*/*.yaml")):
            if not f.stem.isdigit():
                continue
            record = self._load(f)
            if record.status == status:
                out.append(record)
        return out
