"""
Formatting Utilities

Helper functions that turn indicator numbers into display strings.
"""
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

NOT_AVAILABLE = "N/A"

ONE_DECIMAL = Decimal("0.1")

LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

UNIT_PERCENT = "%"
UNIT_PER_THOUSAND = "per 1,000"


def parse_float(value: Optional[Union[str, float, int]]) -> Optional[float]:
    """
    Parse a provider value into a float.

    Strings are read up to the end of their leading number, so "75%" and
    "3.2 per 1,000" parse as 75.0 and 3.2.

    Args:
        value: Raw value (string or number)

    Returns:
        Float value, or None when missing, unparseable or NaN
    """
    if value is None:
        return None
    if isinstance(value, str):
        match = LEADING_FLOAT.match(value)
        if not match:
            return None
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def format_number(value: float) -> str:
    """
    Format a number without a unit.

    Integral values drop the trailing ".0" (e.g. 12.0 -> "12") and small
    values stay in fixed-point notation (5e-05 -> "0.00005").

    Args:
        value: Numeric value

    Returns:
        Plain numeric string
    """
    if not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_one_decimal(value: float) -> str:
    """
    Round to one decimal place, halves away from zero (12.25 -> "12.3").

    The shortest repr of the float is rounded, not its binary expansion.
    """
    if not math.isfinite(value):
        return repr(value)
    return str(Decimal(repr(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_value(value: Optional[float], unit: Optional[str]) -> str:
    """
    Format an indicator value for display according to its unit.

    Args:
        value: Numeric value (None when unavailable)
        unit: Unit label from indicator metadata

    Returns:
        Formatted value (e.g., "75.0%", "3.2 per 1,000", "N/A")
    """
    if value is None:
        return NOT_AVAILABLE

    if unit == UNIT_PERCENT:
        return f"{format_one_decimal(value)}%"
    if unit == UNIT_PER_THOUSAND:
        return f"{format_one_decimal(value)} per 1,000"
    return format_number(value)


def format_range(
    minimum: Optional[float],
    maximum: Optional[float],
    unit: Optional[str]
) -> str:
    """
    Format a min-max range label.

    Args:
        minimum: Lowest value across areas
        maximum: Highest value across areas
        unit: Unit label from indicator metadata

    Returns:
        Range label (e.g., "12.0% - 48.5%")
    """
    return f"{format_value(minimum, unit)} - {format_value(maximum, unit)}"
