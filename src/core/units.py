"""Time units used to convert rates and durations before reporting."""

from enum import Enum

__all__ = ["TimeUnit", "to_whole_seconds"]


class TimeUnit(Enum):
    """Unit of time; the value is the unit's length in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * 1_000_000_000
    HOURS = 60 * 60 * 1_000_000_000
    DAYS = 24 * 60 * 60 * 1_000_000_000

    @classmethod
    def parse(cls, name: str) -> "TimeUnit":
        """Look up a unit by case-insensitive name (e.g. "seconds").

        Raises:
            ValueError: If the name does not match any unit.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            valid = ", ".join(u.name.lower() for u in cls)
            raise ValueError(f"Unknown time unit {name!r} (expected one of: {valid})") from e

    @property
    def seconds(self) -> float:
        """Length of one unit in seconds."""
        return self.value / TimeUnit.SECONDS.value

    def convert_rate(self, per_second: float) -> float:
        """Convert an events-per-second rate into events per this unit."""
        return per_second * self.seconds

    def convert_duration(self, nanoseconds: float) -> float:
        """Convert a nanosecond duration into this unit."""
        return nanoseconds / self.value


def to_whole_seconds(duration: float, unit: TimeUnit) -> int:
    """Convert a duration to seconds, truncating toward zero.

    Args:
        duration: Amount of time expressed in ``unit``.
        unit: Unit of ``duration``.

    Returns:
        Whole seconds (2500 ms -> 2).
    """
    return int(duration * unit.value / TimeUnit.SECONDS.value)
