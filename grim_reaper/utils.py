"""Shared utilities: inactivity arithmetic, message templating, immunity labels."""

from datetime import UTC, datetime
from typing import Iterable

DAYS_PLACEHOLDER = "{{days}}"

_SECONDS_PER_DAY = 86400


def parse_iso(s: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp (trailing Z allowed) as aware UTC."""
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from start to end, floored.

    Args:
        start: Earlier moment (e.g. last update or warning time).
        end: Moment of measurement, usually now.

    Returns:
        Number of complete 24h periods; negative if start is after end.
    """
    return int((end - start).total_seconds() // _SECONDS_PER_DAY)


def inactivity_days(updated_at: datetime, now: datetime) -> int:
    """Whole days a PR has been inactive at ``now``."""
    return days_between(updated_at, now)


def render_message(template: str, days: int | None = None) -> str:
    """Substitute ``{{days}}`` in a comment template.

    Only the literal ``{{days}}`` placeholder is recognized. A template
    without it, or a call without ``days``, returns the template verbatim.
    """
    if days is None:
        return template
    return template.replace(DAYS_PLACEHOLDER, str(days))


def has_immunity_label(labels: Iterable[str], immunity_labels: Iterable[str]) -> bool:
    """True when any PR label is one of the immunity labels (case-sensitive)."""
    immune = set(immunity_labels)
    return any(label in immune for label in labels)
