"""Line-protocol text rules: name/value sanitization and number rendering."""

import re

from src.ports.metrics import FractionalValue, IntegralValue, NumericValue

__all__ = ["format_numeric", "metric_name", "sanitize_name", "sanitize_value"]

_PARAMETER_LIST = re.compile(r"\(([^()]*)\)")
_PARAMETER_SEPARATOR = re.compile(r",\s*")
_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")
_WHITESPACE = re.compile(r"\s")


def _rewrite_parameters(match: re.Match[str]) -> str:
    return "__" + _PARAMETER_SEPARATOR.sub("-", match.group(1)) + "__"


def sanitize_name(name: str) -> str:
    """Make a metric name safe for the whitespace-delimited protocol.

    ``invoked(param1, param2)`` becomes ``invoked__param1-param2__``; every
    other character outside ``[A-Za-z0-9_.-]`` becomes ``.``. Runs of
    separators are kept as they are.

    Args:
        name: Raw metric name.

    Returns:
        Sanitized name.
    """
    name = _PARAMETER_LIST.sub(_rewrite_parameters, name)
    name = name.replace("(", "__").replace(")", "__")
    return _INVALID_NAME_CHARS.sub(".", name)


def sanitize_value(value: str) -> str:
    """Replace every whitespace character in a value with ``.``."""
    return _WHITESPACE.sub(".", value)


def format_numeric(value: NumericValue) -> str:
    """Render a metric value.

    Integral values render as plain decimals, fractional ones with exactly
    two digits after a ``.`` (never a locale-dependent comma).

    Args:
        value: Tagged numeric value.

    Returns:
        Value as protocol text.
    """
    match value:
        case IntegralValue(value=n):
            return str(n)
        case FractionalValue(value=v):
            return f"{v:.2f}"
    raise TypeError(f"Unsupported metric value: {value!r}")


def metric_name(prefix: str | None, *components: str) -> str:
    """Join a prefix and name components with dots, skipping empty parts."""
    return ".".join(part for part in (prefix, *components) if part)
