"""Tests for gauge value tagging."""

from decimal import Decimal
from fractions import Fraction

import pytest

from src.ports.metrics import FractionalValue, IntegralValue, as_numeric

__all__ = []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (1, IntegralValue(1)),
        (2**40, IntegralValue(2**40)),
        (1.1, FractionalValue(1.1)),
        (Fraction(1, 2), FractionalValue(0.5)),
    ],
)
def test_as_numeric_tags_numbers(raw: object, expected: object) -> None:
    """Integral numbers stay integral, real numbers become fractional."""
    assert as_numeric(raw) == expected


@pytest.mark.parametrize("raw", ["value", None, True, Decimal("1.5"), [1]])
def test_as_numeric_rejects_other_values(raw: object) -> None:
    """Non-numeric gauge values cannot be reported."""
    assert as_numeric(raw) is None
