"""Record storage for tracked pull requests."""

from grim_reaper.store.base import MemoryRecordStore, PreviewRecordStore, RecordStore, StoreError
from grim_reaper.store.schemas import PullRequestRecord
from grim_reaper.store.yaml_store import YamlRecordStore

__all__ = [
    "MemoryRecordStore",
    "PreviewRecordStore",
    "PullRequestRecord",
    "RecordStore",
    "StoreError",
    "YamlRecordStore",
]
