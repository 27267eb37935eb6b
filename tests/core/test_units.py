"""Tests for time unit conversions."""

import pytest

from src.core.units import TimeUnit, to_whole_seconds

__all__ = []


def test_convert_rate_to_unit() -> None:
    """Per-second rates should scale to the target unit."""
    assert TimeUnit.SECONDS.convert_rate(2.0) == 2.0
    assert TimeUnit.MINUTES.convert_rate(2.0) == 120.0
    assert TimeUnit.MILLISECONDS.convert_rate(2000.0) == pytest.approx(2.0)


def test_convert_duration_from_nanoseconds() -> None:
    """Nanosecond durations should scale to the target unit."""
    assert TimeUnit.MILLISECONDS.convert_duration(100_000_000) == 100.0
    assert TimeUnit.SECONDS.convert_duration(1_500_000_000) == 1.5
    assert TimeUnit.NANOSECONDS.convert_duration(7) == 7.0


def test_to_whole_seconds_truncates() -> None:
    """Durations should be truncated, not rounded."""
    assert to_whole_seconds(2500, TimeUnit.MILLISECONDS) == 2
    assert to_whole_seconds(5, TimeUnit.SECONDS) == 5
    assert to_whole_seconds(999, TimeUnit.MILLISECONDS) == 0


@pytest.mark.parametrize("name", ["seconds", "SECONDS", " Milliseconds "])
def test_parse_accepts_names(name: str) -> None:
    """Unit names should be parsed case-insensitively."""
    assert TimeUnit.parse(name) in (TimeUnit.SECONDS, TimeUnit.MILLISECONDS)


def test_parse_rejects_unknown_names() -> None:
    """Unknown unit names should raise ValueError."""
    with pytest.raises(ValueError, match="Unknown time unit"):
        TimeUnit.parse("fortnights")
