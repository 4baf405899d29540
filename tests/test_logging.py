"""Tests for grim_reaper.logging (root logger setup from LoggingConfig)."""

import logging

import pytest

from grim_reaper.config import LoggingConfig
from grim_reaper.logging import DEFAULT_FORMAT, DRY_RUN_PREFIX, _resolve_level, setup_logging


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("ERROR", logging.ERROR),
        (" debug ", logging.DEBUG),
        ("\tWarning\t", logging.WARNING),
        ("TRACE", logging.INFO),
        ("", logging.INFO),
    ],
)
def test_resolve_level(name: str, expected: int) -> None:
    """Names are normalized; unknown ones fall back to INFO."""
    assert _resolve_level(name) == expected


def test_setup_sets_root_level() -> None:
    """The configured level is applied to the root logger and returned."""
    assert setup_logging(LoggingConfig(level="ERROR", format="%(message)s")) == logging.ERROR
    assert logging.root.level == logging.ERROR


def test_format_and_default() -> None:
    """config.format is used as is; an empty one means DEFAULT_FORMAT."""
    setup_logging(LoggingConfig(level="INFO", format="%(levelname)s || %(message)s"))
    assert logging.root.handlers[0].formatter._fmt == "%(levelname)s || %(message)s"
    setup_logging(LoggingConfig(level="INFO", format=""))
    assert logging.root.handlers[0].formatter._fmt == DEFAULT_FORMAT


def test_dry_run_prefixes_every_line() -> None:
    """Dry runs are marked in the log format."""
    setup_logging(LoggingConfig(level="INFO", format="%(message)s"), dry_run=True)
    assert logging.root.handlers[0].formatter._fmt == DRY_RUN_PREFIX + "%(message)s"


def test_urllib3_quiet_unless_debug() -> None:
    """Request logging from urllib3 only shows up at DEBUG."""
    setup_logging(LoggingConfig(level="INFO"))
    assert logging.getLogger("urllib3").level == logging.WARNING
    setup_logging(LoggingConfig(level="DEBUG"))
    assert logging.getLogger("urllib3").level == logging.DEBUG
