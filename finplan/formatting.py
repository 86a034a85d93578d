"""
Display formatting.

The only place amounts are rounded. Swiss conventions: whole francs,
thousands grouped with a typographic apostrophe (265’330 CHF).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

THOUSANDS_SEPARATOR = "’"

Number = Union[int, float, str, Decimal]


def _round_half_up(value: Number, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value).strip()).quantize(exponent, rounding=ROUND_HALF_UP)
    # No "-0" for small negative amounts
    return rounded.copy_abs() if rounded.is_zero() else rounded


def format_number(value: Optional[Number], places: int = 0) -> str:
    """Round half-up and group thousands: 1234567.5 -> '1’234’568'."""
    if value is None:
        value = 0
    rounded = _round_half_up(value, places)
    text = f"{rounded:,.{places}f}"
    return text.replace(",", THOUSANDS_SEPARATOR)


def format_chf(value: Optional[Number]) -> str:
    """
    Whole Swiss francs.

        >>> format_chf(265329.77)
        '265’330 CHF'
        >>> format_chf(None)
        '0 CHF'
    """
    return f"{format_number(value)} CHF"


def format_percent(value: Optional[float], places: int = 0) -> str:
    """
    A fraction as a percentage: 0.054 -> '5%'.

    None formats as '0%'.
    """
    if value is None:
        return "0%"
    return f"{_round_half_up(Decimal(str(value)) * 100, places)}%"
