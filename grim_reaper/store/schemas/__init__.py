"""Schemas for store YAML files (PR tracking records)."""

from grim_reaper.store.schemas.record import PullRequestRecord

__all__ = ["PullRequestRecord"]
