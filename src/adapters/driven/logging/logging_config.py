"""Console logging setup for the reporter."""

import logging

__all__ = ["configure_logs"]

_configured = False


def configure_logs(level: int = logging.INFO) -> None:
    """Configure console logging once per process.

    Sets up:
    - Root logger at ``level`` (INFO by default).
    - asyncio logger at WARNING level.
    - Application loggers (src) at DEBUG level.
    - Format with timestamp, level, logger name and line number.

    Repeated calls only adjust the root level, so no duplicate handlers
    are attached.

    Args:
        level: Root logger level.
    """
    global _configured

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
        "%d/%m/%y %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("src").setLevel(logging.DEBUG)
    _configured = True
