"""Git platform adapters."""

from grim_reaper.adapters.base import GitPlatformError, VCSAdapter
from grim_reaper.adapters.dry_run import DryRunAdapter
from grim_reaper.adapters.github import GitHubAdapter

__all__ = ["DryRunAdapter", "GitPlatformError", "GitHubAdapter", "VCSAdapter"]
