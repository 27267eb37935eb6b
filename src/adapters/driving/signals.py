"""Signal handling for graceful shutdown."""

import asyncio
import logging
import signal
from collections.abc import Callable

__all__ = ["make_stop_on_sigterm"]

logger = logging.getLogger(__name__)


def make_stop_on_sigterm() -> Callable[[], bool]:
    """Create a SIGTERM/SIGINT stop flag for the report loop.

    The handlers set an asyncio.Event; the returned callable is polled by
    the loop between report cycles, so the cycle in flight finishes and
    the reporter can close its connection cleanly.

    Returns:
        Callable that returns True once a termination signal arrived.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"{sig.name} received, stopping after the current report cycle...")
        stop.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal, sig)

    return stop.is_set
