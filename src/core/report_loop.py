"""Main loop that periodically triggers a report cycle."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from src.ports.settings import SettingsPort

__all__ = ["start_report_loop", "get_now_time"]

logger = logging.getLogger(__name__)

# Longest uninterrupted sleep, so a stop request is noticed mid-period
STOP_POLL_SEC = 1.0


def get_now_time() -> float:
    """Get current monotonic time in seconds.

    Uses event loop's monotonic clock for accurate scheduling
    without wall-clock drift.

    Returns:
        Current time in seconds (monotonic).
    """
    return asyncio.get_running_loop().time()


async def start_report_loop(
    settings: SettingsPort,
    stop_fn: Callable[[], bool],
    report_fn: Callable[[], Awaitable[None]],
) -> None:
    """Run the report scheduling loop.

    Periodically:
    1. Await one report cycle.
    2. Sleep until the next tick (based on monotonic time).
    3. Repeat until stop_fn() returns True.

    Args:
        settings: Runtime configuration (period).
        stop_fn: Callable that returns True when loop should exit.
        report_fn: Async function running one report cycle.

    Notes:
        - Cycles are awaited, never overlapped: the connection carries one
          report at a time. A slow cycle delays the next tick instead of
          stacking reports.
        - A failing cycle is logged; the loop keeps its cadence.
    """
    next_tick: float = get_now_time()

    while not stop_fn():
        try:
            await report_fn()
        except asyncio.CancelledError:
            logger.info("Shutdown requested (report cancelled).")
            raise
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error in report cycle: {e}", exc_info=True)

        # Overrunning cycles restart the cadence instead of bursting
        next_tick = max(next_tick + settings.period_in_sec, get_now_time())
        while (remaining := next_tick - get_now_time()) > 0 and not stop_fn():
            await asyncio.sleep(min(remaining, STOP_POLL_SEC))
