"""Application entrypoint."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.instrumental.client import InstrumentalClient
from src.adapters.driven.logging.logging_config import configure_logs
from src.adapters.driven.metrics.runtime_metrics import RuntimeMetrics
from src.adapters.driving.signals import make_stop_on_sigterm
from src.core.report_loop import start_report_loop
from src.core.reporter import InstrumentalReporter
from src.ports.settings import SettingsPort

__all__ = ["main", "make_report_fn"]

logger = logging.getLogger(__name__)


async def main() -> None:
    """Start the Instrumental reporter service.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Run the report loop (the first cycle connects).
    4. On SIGTERM/SIGINT, finish the current cycle and close the connection.
    """
    configure_logs()
    logger.info("Starting Instrumental reporter...")

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check INSTRUMENTAL_API_KEY, INSTRUMENTAL_HOST, INSTRUMENTAL_PORT, "
            "REPORT_PERIOD_IN_SECONDS, RATE_UNIT and DURATION_UNIT.",
            exc,
        )
        return

    # Wrap config into port so core depends on interface (hexagonal)
    settings_port = SettingsPort(
        period_in_sec=config.period_in_sec,
        api_key=config.api_key,
        host=config.host,
        port=config.port,
        prefix=config.prefix,
        rate_unit=config.rate_unit,
        duration_unit=config.duration_unit,
    )

    client = InstrumentalClient(settings_port.api_key, settings_port.host, settings_port.port)
    reporter = InstrumentalReporter(
        client,
        prefix=settings_port.prefix,
        rate_unit=settings_port.rate_unit,
        duration_unit=settings_port.duration_unit,
    )
    metrics = RuntimeMetrics(sender=client)

    try:
        await start_report_loop(
            settings=settings_port,
            stop_fn=make_stop_on_sigterm(),
            report_fn=make_report_fn(reporter, metrics),
        )
    except Exception as e:
        logger.error(f"Unhandled exception in report loop: {e}", exc_info=True)
    finally:
        await reporter.stop()

    logger.info("Instrumental reporter stopped.")


def make_report_fn(
    reporter: InstrumentalReporter, metrics: RuntimeMetrics
) -> Callable[[], Awaitable[None]]:
    """Bind one report cycle: collect, report, then time the cycle.

    Args:
        reporter: Reporter writing to the collector.
        metrics: Source of the metric set; also records cycle durations.

    Returns:
        Coroutine function running one cycle.
    """

    async def report_once() -> None:
        started = time.perf_counter()
        await reporter.report(metrics.collect())
        metrics.record_cycle(time.perf_counter() - started)
        logger.debug(f"Report cycle: {metrics}")

    return report_once


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")
