"""Root logger setup for the reaper CLI and daemon.

logging.level picks one of DEBUG, INFO, WARNING or ERROR (unknown names mean
INFO). INFO is the useful default: one line per warning posted, PR closed or
immunity granted, plus a summary per run. DEBUG adds per-candidate decisions
and lets urllib3 log each GitHub request.

Dry runs get a "[dry-run]" prefix on every line so previews are not mistaken
for live runs in shared log files.
"""

import logging

from grim_reaper.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DRY_RUN_PREFIX = "[dry-run] "

# Chatty below WARNING; only let them through at DEBUG
NOISY_LOGGERS = ("urllib3",)


def _resolve_level(level: str) -> int:
    return LEVELS.get(level.upper().strip(), logging.INFO)


def setup_logging(config: LoggingConfig, dry_run: bool = False) -> int:
    """Configure the root logger and return the level applied."""
    level = _resolve_level(config.level)
    fmt = config.format or DEFAULT_FORMAT
    if dry_run:
        fmt = DRY_RUN_PREFIX + fmt
    logging.basicConfig(level=level, format=fmt, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level == logging.DEBUG else logging.WARNING)
    return level
