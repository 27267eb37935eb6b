"""Reporter that turns metric snapshots into Instrumental protocol lines."""

import logging
import time
from collections.abc import Callable

from src.core.formatting import format_numeric, metric_name
from src.core.units import TimeUnit
from src.ports.metrics import (
    FractionalValue,
    HistogramDto,
    IntegralValue,
    MeterDto,
    MetricSetDto,
    NumericValue,
    TimerDto,
    as_numeric,
)
from src.ports.sender import MetricType, SenderPort

__all__ = ["InstrumentalReporter"]

logger = logging.getLogger(__name__)


class InstrumentalReporter:
    """Writes one report cycle of metrics through a sender.

    Families are written gauges, counters, histograms, meters, timers; each
    family in ascending name order. All values go out as gauges.

    I/O faults during a cycle are logged and close the sender so the next
    cycle reconnects; they never reach the caller.
    """

    def __init__(
        self,
        sender: SenderPort,
        *,
        prefix: str | None = None,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize reporter.

        Args:
            sender: Where lines are written.
            prefix: Dot-joined in front of every metric name.
            rate_unit: Unit meter and timer rates are converted to.
            duration_unit: Unit timer durations are converted to.
            clock: Returns current Unix time in seconds.
        """
        self.sender = sender
        self.prefix = prefix
        self.rate_unit = rate_unit
        self.duration_unit = duration_unit
        self.clock = clock

    async def report(self, metrics: MetricSetDto) -> None:
        """Send every metric of the set, then flush.

        Args:
            metrics: Point-in-time read of all metrics.
        """
        timestamp = int(self.clock())

        try:
            if not self.sender.is_connected():
                await self.sender.connect()

            for name, value in sorted(metrics.gauges.items()):
                await self._report_gauge(name, value, timestamp)

            for name, counter in sorted(metrics.counters.items()):
                await self._send(timestamp, IntegralValue(counter.count), name, "count")

            for name, histogram in sorted(metrics.histograms.items()):
                await self._report_histogram(name, histogram, timestamp)

            for name, meter in sorted(metrics.meters.items()):
                await self._report_metered(name, meter, timestamp)

            for name, timer in sorted(metrics.timers.items()):
                await self._report_timer(name, timer, timestamp)

            await self.sender.flush()
        except OSError as e:
            logger.warning(f"Unable to report to Instrumental: {e}")
            try:
                await self.sender.close()
            except OSError as close_error:
                logger.warning(f"Error closing Instrumental connection: {close_error}")

    async def stop(self) -> None:
        """Close the sender; close errors are logged, not raised.

        Callers run this from a ``finally`` block so the connection is
        released whatever ended the report loop.
        """
        logger.info("Stopping Instrumental reporter")
        try:
            await self.sender.close()
        except OSError as e:
            logger.debug(f"Error disconnecting from Instrumental: {e}")

    async def _send(self, timestamp: int, value: NumericValue, *name: str) -> None:
        await self.sender.send(
            MetricType.GAUGE,
            metric_name(self.prefix, *name),
            format_numeric(value),
            timestamp,
        )

    async def _report_gauge(self, name: str, raw: object, timestamp: int) -> None:
        value = as_numeric(raw)
        if value is None:
            logger.debug(f"Skipping non-numeric gauge {name!r}")
            return
        await self._send(timestamp, value, name)

    async def _report_histogram(self, name: str, histogram: HistogramDto, timestamp: int) -> None:
        snapshot = histogram.snapshot
        fields: list[tuple[str, NumericValue]] = [
            ("count", IntegralValue(histogram.count)),
            ("max", IntegralValue(snapshot.max)),
            ("mean", FractionalValue(snapshot.mean)),
            ("min", IntegralValue(snapshot.min)),
            ("stddev", FractionalValue(snapshot.stddev)),
            ("p50", FractionalValue(snapshot.median)),
            ("p75", FractionalValue(snapshot.p75)),
            ("p95", FractionalValue(snapshot.p95)),
            ("p98", FractionalValue(snapshot.p98)),
            ("p99", FractionalValue(snapshot.p99)),
            ("p999", FractionalValue(snapshot.p999)),
        ]
        for field_name, value in fields:
            await self._send(timestamp, value, name, field_name)

    async def _report_metered(self, name: str, meter: MeterDto | TimerDto, timestamp: int) -> None:
        await self._send(timestamp, IntegralValue(meter.count), name, "count")
        rates = [
            ("m1_rate", meter.m1_rate),
            ("m5_rate", meter.m5_rate),
            ("m15_rate", meter.m15_rate),
            ("mean_rate", meter.mean_rate),
        ]
        for field_name, rate in rates:
            await self._send(timestamp, FractionalValue(self.rate_unit.convert_rate(rate)), name, field_name)

    async def _report_timer(self, name: str, timer: TimerDto, timestamp: int) -> None:
        snapshot = timer.snapshot
        durations = [
            ("max", snapshot.max),
            ("mean", snapshot.mean),
            ("min", snapshot.min),
            ("stddev", snapshot.stddev),
            ("p50", snapshot.median),
            ("p75", snapshot.p75),
            ("p95", snapshot.p95),
            ("p98", snapshot.p98),
            ("p99", snapshot.p99),
            ("p999", snapshot.p999),
        ]
        for field_name, nanoseconds in durations:
            converted = self.duration_unit.convert_duration(nanoseconds)
            await self._send(timestamp, FractionalValue(converted), name, field_name)

        await self._report_metered(name, timer, timestamp)
