"""
Address Area Extractor

Pulls the locality (town or city) out of a UK property address so it can be
used as an area search query.
"""
import re
from typing import Optional

from src.localhealth.utils.logger import get_logger

logger = get_logger(__name__)

# Outward code, optional space, inward code (e.g. "M1 3LP", "SW1A 1AA", "b338th")
UK_POSTCODE = r"[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}"

# Comma-delimited segment immediately before a trailing postcode
LOCALITY_BEFORE_POSTCODE = re.compile(
    r"(?:^|,)\s*(?P<locality>[^,]+?)\s*,\s*" + UK_POSTCODE + r"\s*$",
    re.IGNORECASE,
)


def extract_area_name(address: Optional[str]) -> Optional[str]:
    """
    Extract the candidate locality name from a property address.

    Args:
        address: Free-text address (e.g., "8 Birch Road, Manchester, M1 3LP")

    Returns:
        Locality name (e.g., "Manchester"), or None when the address has no
        trailing UK postcode
    """
    if not address:
        return None

    match = LOCALITY_BEFORE_POSTCODE.search(address.strip())
    if not match:
        logger.debug("no_postcode_suffix_found", address=address)
        return None

    return match.group("locality").strip()
