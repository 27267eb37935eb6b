"""Process and report-cycle metrics for the reporter's own process."""

from __future__ import annotations

import gc
import os
import statistics
import threading
import time
from collections import deque
from collections.abc import Callable

from src.ports.metrics import CounterDto, HistogramDto, MetricSetDto, MetricsSourcePort, SnapshotDto
from src.ports.sender import SenderPort

__all__ = ["RuntimeMetrics"]


class RuntimeMetrics(MetricsSourcePort):
    """Cheap metrics about the running process and its report cycles.

    Tracks:
    - Uptime, live threads, CPU time and GC collections (gauges).
    - Sender failure count (gauge), when a sender is attached.
    - Report cycles run (counter).
    - Recent report-cycle durations in ms (histogram over a sliding window).

    Not thread-safe; create one instance per event loop.
    """

    def __init__(
        self,
        *,
        sender: SenderPort | None = None,
        window_size: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize metrics source.

        Args:
            sender: Sender whose failure count is exported.
            window_size: Number of recent cycles kept for the histogram.
            clock: Monotonic clock in seconds, used for uptime.
        """
        self.sender = sender
        self._clock = clock
        self._started_at = clock()
        self._window: deque[float] = deque(maxlen=window_size)
        self._cycles: int = 0

    def record_cycle(self, duration_sec: float) -> None:
        """Record how long one report cycle took.

        Args:
            duration_sec: Wall time of the cycle in seconds.
        """
        self._window.append(duration_sec * 1_000.0)
        self._cycles += 1

    def collect(self) -> MetricSetDto:
        """Return the current metric set.

        Returns:
            Gauges, the cycle counter and the cycle-duration histogram.
        """
        cpu = os.times()
        gauges: dict[str, object] = {
            "process.uptime_sec": self._clock() - self._started_at,
            "process.threads": threading.active_count(),
            "process.cpu_user_sec": cpu.user,
            "process.cpu_system_sec": cpu.system,
            "process.gc_collections": sum(s["collections"] for s in gc.get_stats()),
        }
        if self.sender is not None:
            gauges["reporter.failures"] = self.sender.failures

        return MetricSetDto(
            gauges=gauges,
            counters={"reporter.cycles": CounterDto(self._cycles)},
            histograms={"reporter.cycle_ms": HistogramDto(len(self._window), self._snapshot())},
        )

    def _snapshot(self) -> SnapshotDto:
        ordered = sorted(self._window)
        if not ordered:
            return SnapshotDto(0, 0.0, 0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

        # Per-mille cut points; the exclusive method extrapolates past the
        # extremes, so results are kept within the observed range
        cuts = statistics.quantiles(ordered, n=1000) if len(ordered) > 1 else ordered * 999

        def at(permille: int) -> float:
            return min(max(cuts[permille - 1], ordered[0]), ordered[-1])

        return SnapshotDto(
            max=round(ordered[-1]),
            mean=statistics.fmean(ordered),
            min=round(ordered[0]),
            stddev=statistics.stdev(ordered) if len(ordered) > 1 else 0.0,
            median=at(500),
            p75=at(750),
            p95=at(950),
            p98=at(980),
            p99=at(990),
            p999=at(999),
        )

    def __str__(self) -> str:
        """Return human-readable one-line summary for logging.

        Returns:
            Formatted metrics string.
        """
        if not self._window:
            return "Report cycles: waiting for data …"

        last = self._window[-1]
        avg = statistics.fmean(self._window)
        failures = self.sender.failures if self.sender is not None else 0
        return (
            f"cycle={last:6.1f} ms | "
            f"avg={avg:6.1f} ms | "
            f"failures={failures} | "
            f"win={len(self._window)}/{self._window.maxlen} | "
            f"total={self._cycles}"
        )
