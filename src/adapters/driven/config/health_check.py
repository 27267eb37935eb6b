"""Healthcheck validator for container orchestration."""

import logging

from src.adapters.driven.config.settings import load_settings
from src.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Run health check for container orchestration.

    Validates:
    - INSTRUMENTAL_API_KEY is set and is a single word.
    - Collector port, report period and time units are valid.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        _ = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(f"Reporter healthcheck FAILED: {exc}")
        return 1

    logger.info("Reporter healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
