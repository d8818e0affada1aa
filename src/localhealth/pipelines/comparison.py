"""
Comparison Position Mapper

Places a displayed indicator value on a 0-100 gauge between the worst and
best values across England.
"""
import re
from typing import Dict, Optional

from src.localhealth.models.indicator import NormalizedIndicator

MIDPOINT = 50.0

# Leading number of a display string: "75.0%" -> "75.0", "-1.5" -> "-1.5"
DISPLAY_NUMBER = re.compile(r"-?\d*\.?\d+")


def parse_display_number(text: Optional[str]) -> Optional[float]:
    """
    Read the number back out of a formatted value.

    Unit suffixes are ignored, including the digits of " per 1,000".

    Args:
        text: Display string (e.g., "12.3 per 1,000")

    Returns:
        Parsed number, or None for "N/A" and other non-numeric text
    """
    if not text:
        return None
    match = DISPLAY_NUMBER.search(text.replace(",", ""))
    if not match:
        return None
    return float(match.group(0))


def position(value: str, worst: str, best: str) -> float:
    """
    Gauge position of a value between worst (0) and best (100).

    Only the leading number of each display string is read. Stripping every
    non-numeric character instead would turn "12.3 per 1,000" into 12.31000.

    The result is not clamped: values beyond the worst or best bound fall
    below 0 or above 100.

    Args:
        value: Formatted value to place
        worst: Formatted worst value
        best: Formatted best value

    Returns:
        Position, 50 when the bounds coincide or any input is not numeric
    """
    value_number = parse_display_number(value)
    worst_number = parse_display_number(worst)
    best_number = parse_display_number(best)

    if value_number is None or worst_number is None or best_number is None:
        return MIDPOINT

    span = best_number - worst_number
    if span == 0:
        return MIDPOINT

    return ((value_number - worst_number) / span) * 100


def indicator_positions(indicator: NormalizedIndicator) -> Dict[str, float]:
    """
    Gauge positions of an indicator's local and national values.

    Args:
        indicator: Normalized indicator

    Returns:
        Dictionary with "local" and "national" positions
    """
    return {
        "local": position(indicator.local_value, indicator.worst_value, indicator.best_value),
        "national": position(indicator.national_value, indicator.worst_value, indicator.best_value),
    }
