"""Metrics port definition (snapshot DTOs and source interface)."""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

__all__ = [
    "CounterDto",
    "FractionalValue",
    "HistogramDto",
    "IntegralValue",
    "MeterDto",
    "MetricSetDto",
    "MetricsSourcePort",
    "NumericValue",
    "SnapshotDto",
    "TimerDto",
    "as_numeric",
]


@dataclass(slots=True, frozen=True)
class IntegralValue:
    """Whole-number metric value, rendered without decimals."""

    value: int


@dataclass(slots=True, frozen=True)
class FractionalValue:
    """Floating-point metric value, rendered with two decimals."""

    value: float


NumericValue = IntegralValue | FractionalValue


def as_numeric(raw: object) -> NumericValue | None:
    """Tag a raw gauge value as integral or fractional.

    Booleans, strings and any other non-numeric value yield None so the
    gauge is skipped.

    Args:
        raw: Value read from a gauge.

    Returns:
        Tagged value, or None when the value cannot be reported.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, numbers.Integral):
        # Stays integral and renders bare ("1"), not promoted to a float ("1.00")
        return IntegralValue(int(raw))
    if isinstance(raw, numbers.Real):
        return FractionalValue(float(raw))
    return None


@dataclass(slots=True, frozen=True)
class SnapshotDto:
    """Immutable statistical summary of a histogram or timer.

    For timers every field is expressed in nanoseconds.
    """

    max: int
    mean: float
    min: int
    stddev: float
    median: float
    p75: float
    p95: float
    p98: float
    p99: float
    p999: float


@dataclass(slots=True, frozen=True)
class CounterDto:
    """Current value of a counter."""

    count: int


@dataclass(slots=True, frozen=True)
class HistogramDto:
    """Count plus distribution summary of observed values."""

    count: int
    snapshot: SnapshotDto


@dataclass(slots=True, frozen=True)
class MeterDto:
    """Event count and per-second moving rates."""

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float


@dataclass(slots=True, frozen=True)
class TimerDto:
    """Meter of invocations plus a duration snapshot (nanoseconds)."""

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float
    snapshot: SnapshotDto


@dataclass(slots=True, frozen=True)
class MetricSetDto:
    """All metrics handed to the reporter for one report cycle.

    Attributes:
        gauges: Raw gauge values by name (any type; non-numeric are skipped).
        counters: Counters by name.
        histograms: Histograms by name.
        meters: Meters by name.
        timers: Timers by name.
    """

    gauges: Mapping[str, object] = field(default_factory=dict)
    counters: Mapping[str, CounterDto] = field(default_factory=dict)
    histograms: Mapping[str, HistogramDto] = field(default_factory=dict)
    meters: Mapping[str, MeterDto] = field(default_factory=dict)
    timers: Mapping[str, TimerDto] = field(default_factory=dict)


class MetricsSourcePort(Protocol):
    """Interface for whatever owns the metric values.

    The report loop calls collect() once per cycle and hands the result to
    the reporter.
    """

    def collect(self) -> MetricSetDto:
        """Return a point-in-time read of every metric.

        Returns:
            Metric set for this cycle.
        """
        ...
