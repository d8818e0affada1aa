"""
Indicator Name Transformer

Splits raw indicator names into a clean display name and an age group.
Raw names look like "Under 75 mortality rate from cancer (1-74 yrs) (Persons)".
"""
import re

AGE_RANGE = re.compile(r"\((\d+[\s-]+\d+\s+yrs)\)", re.IGNORECASE)
AGE_RANGE_ANNOTATION = re.compile(r"\s*\(\d+[\s-]+\d+\s+yrs\)", re.IGNORECASE)
PARENTHETICAL = re.compile(r"\s*\([^)]*\)")


def clean_name(name: str) -> str:
    """
    Remove the age-range annotation and any other parenthetical from a name.

    Args:
        name: Raw indicator name

    Returns:
        Display name (e.g., "Under 75 mortality rate from cancer")
    """
    if not name:
        return ""
    name = AGE_RANGE_ANNOTATION.sub("", name, count=1)
    return PARENTHETICAL.sub("", name).strip()


def extract_age_group(name: str) -> str:
    """
    Extract the age-range annotation from a raw indicator name.

    Args:
        name: Raw indicator name

    Returns:
        Age range (e.g., "1-74 yrs"), or "" when absent
    """
    if not name:
        return ""
    match = AGE_RANGE.search(name)
    return match.group(1) if match else ""
