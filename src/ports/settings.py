"""Settings port definition (DTO)."""

from dataclasses import dataclass

from src.core.units import TimeUnit

__all__ = ["SettingsPort"]


@dataclass
class SettingsPort:
    """Runtime settings for the reporter and its loop.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        period_in_sec: Seconds between report cycles.
        api_key: Project token sent in the authenticate step.
        host: Collector hostname.
        port: Collector TCP port.
        prefix: Optional prefix joined in front of every metric name.
        rate_unit: Unit rates are converted to.
        duration_unit: Unit timer durations are converted to.
    """

    period_in_sec: float
    api_key: str
    host: str
    port: int
    prefix: str | None = None
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
