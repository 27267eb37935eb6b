"""Configuration loading from environment variables."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from src.adapters.driven.instrumental.client import DEFAULT_PORT
from src.core.units import TimeUnit

__all__ = ["Settings", "load_settings", "DEFAULT_HOST"]

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_HOST = "collector.instrumentalapp.com"
DEFAULT_PERIOD_IN_SECONDS = 60


class Settings(BaseModel):
    """Runtime configuration for the reporter service.

    Attributes:
        api_key: Project token sent in the authenticate step.
        host: Collector hostname.
        port: Collector TCP port.
        period_in_sec: Interval between report cycles in seconds.
        prefix: Optional prefix for every metric name.
        rate_unit: Unit rates are converted to.
        duration_unit: Unit timer durations are converted to.
    """

    api_key: str = Field(..., min_length=1, description="Instrumental project token.")
    host: str = Field(default=DEFAULT_HOST, min_length=1, description="Collector hostname.")
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536, description="Collector TCP port.")
    period_in_sec: int = Field(
        default=DEFAULT_PERIOD_IN_SECONDS, gt=0, description="Interval between reports in seconds."
    )
    prefix: str | None = Field(default=None, description="Prefix joined to every metric name.")
    rate_unit: TimeUnit = Field(default=TimeUnit.SECONDS, description="Unit for rates.")
    duration_unit: TimeUnit = Field(default=TimeUnit.MILLISECONDS, description="Unit for durations.")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that the token can travel as a single protocol word.

        Args:
            v: Token to validate.

        Returns:
            The validated token.

        Raises:
            ValueError: If token contains whitespace.
        """
        if any(c.isspace() for c in v):
            raise ValueError("API key must not contain whitespace")
        return v

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str | None) -> str | None:
        """Normalize the prefix: surrounding dots and blanks are dropped.

        Args:
            v: Prefix to validate (can be None).

        Returns:
            The cleaned prefix, or None when empty.
        """
        if v is None:
            return v
        v = v.strip().strip(".")
        return v or None

    @field_validator("rate_unit", "duration_unit", mode="before")
    @classmethod
    def validate_unit(cls, v: object) -> object:
        """Accept unit names such as "seconds" or "MILLISECONDS".

        Raises:
            ValueError: If the name is not a known unit.
        """
        if isinstance(v, str):
            return TimeUnit.parse(v)
        return v


def load_settings() -> Settings:
    """Load and validate settings from the environment.

    Required environment variables:
    - INSTRUMENTAL_API_KEY: Project token.

    Optional:
    - INSTRUMENTAL_HOST: Collector hostname (default collector.instrumentalapp.com).
    - INSTRUMENTAL_PORT: Collector port (default 8000).
    - REPORT_PERIOD_IN_SECONDS: Positive integer (default 60).
    - METRIC_PREFIX: Prefix for metric names.
    - RATE_UNIT / DURATION_UNIT: Time unit names (default seconds / milliseconds).

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or invalid.
        ValueError: If configuration is invalid.
    """
    try:
        api_key = os.environ["INSTRUMENTAL_API_KEY"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    period_raw = os.getenv("REPORT_PERIOD_IN_SECONDS", str(DEFAULT_PERIOD_IN_SECONDS))
    port_raw = os.getenv("INSTRUMENTAL_PORT", str(DEFAULT_PORT))

    try:
        period_in_sec = int(period_raw)
        if period_in_sec <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(
            f"REPORT_PERIOD_IN_SECONDS must be a positive integer (got: {period_raw})"
        ) from e

    try:
        port = int(port_raw)
    except ValueError as e:
        raise RuntimeError(f"INSTRUMENTAL_PORT must be an integer (got: {port_raw})") from e

    settings = Settings(
        api_key=api_key,
        host=os.getenv("INSTRUMENTAL_HOST", DEFAULT_HOST),
        port=port,
        period_in_sec=period_in_sec,
        prefix=os.getenv("METRIC_PREFIX"),
        rate_unit=os.getenv("RATE_UNIT", "seconds"),
        duration_unit=os.getenv("DURATION_UNIT", "milliseconds"),
    )

    logger.info(
        f"Reporter configured: collector={settings.host}:{settings.port}, "
        f"period={settings.period_in_sec}s, "
        f"prefix={settings.prefix or '<none>'}, "
        f"rates=per {settings.rate_unit.name.lower()}, "
        f"durations={settings.duration_unit.name.lower()}"
    )

    return settings
