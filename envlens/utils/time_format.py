"""Time and label formatting utilities.

Provides functions to turn control-plane timestamps and keys into short
display strings:
- Relative time: "just now", "5m ago", "3h ago", "2d ago"
- Elapsed / duration: "42s", "5m 3s", "2h 10m"
- Dates: "Mar 4, 2025"
- Keys: "kubernetesVersion" -> "Kubernetes Version"
"""

import math
import re
from contextlib import suppress
from datetime import datetime, timezone
from typing import Any

from envlens.constants.values import NO_VALUE

_CAMEL_BOUNDARY_RE = re.compile(r"([A-Z])")
_SEPARATOR_RE = re.compile(r"[_-]")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime.

    Returns:
        The parsed datetime, or None when the value is empty or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        with suppress(OverflowError, OSError, ValueError):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_timestamp(int(text))
        with suppress(ValueError):
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return None


def _seconds_since(value: Any, now: datetime | None) -> int | None:
    moment = parse_timestamp(value)
    if moment is None:
        return None
    current = now or datetime.now(timezone.utc)
    return math.floor((current - moment).total_seconds())


def format_relative(value: Any, now: datetime | None = None) -> str:
    """Format a timestamp relative to ``now`` ("5m ago")."""
    seconds = _seconds_since(value, now)
    if seconds is None:
        return NO_VALUE
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def _format_span(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def format_elapsed(value: Any, now: datetime | None = None) -> str:
    """Format how long ago ``value`` happened ("5m 3s"); empty when unknown."""
    seconds = _seconds_since(value, now)
    if seconds is None:
        return ""
    return _format_span(max(0, seconds))


def format_duration(seconds: int | float | None) -> str:
    """Format a duration in seconds ("2h 10m")."""
    if not seconds:
        return NO_VALUE
    return _format_span(int(seconds))


def format_date(value: Any) -> str:
    """Format a timestamp as a short date ("Mar 4, 2025")."""
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def humanize(key: str) -> str:
    """Turn a camelCase / snake_case / kebab-case key into a label."""
    spaced = _CAMEL_BOUNDARY_RE.sub(r" \1", key)
    spaced = _SEPARATOR_RE.sub(" ", spaced).strip()
    if not spaced:
        return spaced
    return spaced[0].upper() + spaced[1:]


__all__ = [
    "format_date",
    "format_duration",
    "format_elapsed",
    "format_relative",
    "humanize",
    "parse_timestamp",
]
