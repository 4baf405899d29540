"""Entry points for the two scheduled operations.

Each handler builds the adapter, store and engine from an explicit AppConfig,
runs one operation and re-raises any failure so the caller (CLI, scheduler or
an external cron) can report it.
"""

import logging
from pathlib import Path

from grim_reaper.adapters import DryRunAdapter, GitHubAdapter, VCSAdapter
from grim_reaper.config import AppConfig
from grim_reaper.services import ReaperService, RunSummary
from grim_reaper.store import PreviewRecordStore, RecordStore, YamlRecordStore

LOG = logging.getLogger("grim_reaper.handlers")


def build_service(config: AppConfig) -> ReaperService:
    """Wire GitHubAdapter and YamlRecordStore into a ReaperService.

    With dry_run the adapter only logs comments and closures, and records
    are read from the store but never written back.

    Raises ConfigError when no GitHub token is configured.
    """
    token = config.require_github_token()
    adapter: VCSAdapter = GitHubAdapter(token=token, api_url=config.github.api_url)
    store: RecordStore = YamlRecordStore(Path(config.store.path))
    if config.reaper.dry_run:
        adapter = DryRunAdapter(adapter)
        store = PreviewRecordStore(store)
    return ReaperService(adapter, store, config.reaper)


def warning_handler(config: AppConfig, service: ReaperService | None = None) -> RunSummary:
    """Run one warning scan."""
    LOG.info("Warning run started")
    try:
        reaper = service or build_service(config)
        summary = reaper.scan_and_warn()
    except Exception as e:
        LOG.error("Warning run failed: %s", e)
        raise
    LOG.info("Warning run completed")
    return summary


def execution_handler(config: AppConfig, service: ReaperService | None = None) -> RunSummary:
    """Run one review of warned PRs."""
    LOG.info("Execution run started")
    try:
        reaper = service or build_service(config)
        summary = reaper.review_and_execute()
    except Exception as e:
        LOG.error("Execution run failed: %s", e)
        raise
    LOG.info("Execution run completed")
    return summary
