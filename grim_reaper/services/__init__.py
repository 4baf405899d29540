"""Reaper services."""

from grim_reaper.services.reaper import ReaperService, RunSummary

__all__ = ["ReaperService", "RunSummary"]
