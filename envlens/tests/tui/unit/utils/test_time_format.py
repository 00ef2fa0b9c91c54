"""Tests for time and label formatting utilities."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from envlens.constants.values import NO_VALUE
from envlens.utils.time_format import (
    format_date,
    format_duration,
    format_elapsed,
    format_relative,
    humanize,
    parse_timestamp,
)

NOW = datetime(2025, 3, 4, 12, 0, 0, tzinfo=timezone.utc)


def _ago(**kwargs: float) -> str:
    return (NOW - timedelta(**kwargs)).isoformat()


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_iso_with_z(self) -> None:
        assert parse_timestamp("2025-03-04T12:00:00Z") == NOW

    def test_naive_iso_is_utc(self) -> None:
        assert parse_timestamp("2025-03-04T12:00:00") == NOW

    def test_epoch_millis(self) -> None:
        millis = int(NOW.timestamp() * 1000)
        assert parse_timestamp(millis) == NOW
        assert parse_timestamp(str(millis)) == NOW

    @pytest.mark.parametrize("value", [None, "", "yesterday", True, [], {}])
    def test_unparseable(self, value) -> None:
        assert parse_timestamp(value) is None


class TestFormatRelative:
    """Tests for format_relative."""

    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            ({"seconds": 30}, "just now"),
            ({"minutes": 5}, "5m ago"),
            ({"hours": 3, "minutes": 59}, "3h ago"),
            ({"days": 2, "hours": 5}, "2d ago"),
        ],
    )
    def test_buckets(self, delta: dict[str, float], expected: str) -> None:
        assert format_relative(_ago(**delta), NOW) == expected

    def test_missing(self) -> None:
        assert format_relative(None, NOW) == NO_VALUE


class TestDurations:
    """Tests for format_elapsed and format_duration."""

    def test_elapsed(self) -> None:
        assert format_elapsed(_ago(seconds=42), NOW) == "42s"
        assert format_elapsed(_ago(minutes=5, seconds=3), NOW) == "5m 3s"
        assert format_elapsed(_ago(hours=2, minutes=10), NOW) == "2h 10m"

    def test_elapsed_future_clamps_to_zero(self) -> None:
        assert format_elapsed((NOW + timedelta(seconds=30)).isoformat(), NOW) == "0s"

    def test_elapsed_missing_is_empty(self) -> None:
        assert format_elapsed(None, NOW) == ""

    def test_duration(self) -> None:
        assert format_duration(75) == "1m 15s"
        assert format_duration(0) == NO_VALUE
        assert format_duration(None) == NO_VALUE


class TestLabels:
    """Tests for format_date and humanize."""

    def test_format_date(self) -> None:
        assert format_date("2025-03-04T12:00:00Z") == "Mar 4, 2025"
        assert format_date(None) == ""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("kubernetesVersion", "Kubernetes Version"),
            ("helm_version", "Helm version"),
            ("in-progress", "In progress"),
            ("", ""),
        ],
    )
    def test_humanize(self, key: str, expected: str) -> None:
        assert humanize(key) == expected
