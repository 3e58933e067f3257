# app/core/validation.py

"""
Facility name validation for bulk imports.

Spreadsheet columns mix facility names with headers, administrative
divisions and stray numbers. Decides which cells are worth importing.
"""

import re
from typing import Optional

from app.models import FacilityNameValidation
from app.core.normalizers import normalize_facility_name


# Administrative divisions that are not facilities on their own
ADMINISTRATIVE_TERMS = [
    "sub county", "subcounty", "sub-county",
    "sub location", "sublocation", "sub-location",
    "ward", "wards",
    "location", "locations",
    "county", "counties",
    "constituency", "constituencies",
    "division", "divisions",
    "district", "districts",
    "region", "regions",
    "zone", "zones",
    "area", "areas",
    "sector", "sectors",
    "village", "villages",
    "town", "towns",
    "center", "centre", "centers", "centres",
]

# Any of these makes an administrative-looking string a facility again
_FACILITY_WORDS = ["hospital", "health", "dispensary", "clinic", "centre", "center"]

HEADER_PATTERNS = [
    re.compile(r"^(facility|name|server|group|type|number|id|total|count)\b", re.IGNORECASE),
    re.compile(r"^#"),
    re.compile(r"^no\.", re.IGNORECASE),
    re.compile(r"^s\.?n\.?(\s|$)", re.IGNORECASE),
]

FACILITY_TYPE_INDICATORS = [
    "hospital", "hospitals",
    "health centre", "health center", "health centres", "health centers",
    "medical centre", "medical center", "medical centres", "medical centers",
    "dispensary", "dispensaries",
    "clinic", "clinics",
    "maternity", "nursing home", "nursing homes",
    "health training centre", "health training center",
]

_ONLY_NUMBERS = re.compile(r"^[\d\s\-_.]+$")

MIN_NAME_LENGTH = 4

# Shortest side allowed to match a master name by containment
MIN_MASTER_OVERLAP = 5


def validate_facility_name(
    value: str,
    master_facilities: Optional[list[str]] = None,
) -> FacilityNameValidation:
    """
    Check whether an imported value is a facility name.

    Valid when it carries a facility type word or matches a known master
    facility. Returns the reason when rejected.
    """
    normalized = normalize_facility_name(value)

    # ============================================
    # Administrative divisions
    # ============================================
    for term in ADMINISTRATIVE_TERMS:
        if normalized == term or normalized.startswith(term + " ") or normalized.endswith(" " + term):
            if not any(word in normalized for word in _FACILITY_WORDS):
                return FacilityNameValidation(is_valid=False, reason=f"Administrative division: {term}")

    # ============================================
    # Headers and metadata
    # ============================================
    stripped = value.strip()
    for pattern in HEADER_PATTERNS:
        if pattern.search(stripped):
            return FacilityNameValidation(is_valid=False, reason="Header/metadata pattern")

    if len(stripped) < MIN_NAME_LENGTH:
        return FacilityNameValidation(is_valid=False, reason="Too short")

    if _ONLY_NUMBERS.match(stripped):
        return FacilityNameValidation(is_valid=False, reason="Only numbers/special characters")

    # ============================================
    # Facility type or known master facility
    # ============================================
    if any(indicator in normalized for indicator in FACILITY_TYPE_INDICATORS):
        return FacilityNameValidation(is_valid=True)

    if master_facilities and _matches_master(normalized, master_facilities):
        return FacilityNameValidation(is_valid=True)

    return FacilityNameValidation(is_valid=False, reason="No facility type indicator and no master match")


def _matches_master(normalized: str, master_facilities: list[str]) -> bool:
    for master in master_facilities:
        master_normalized = normalize_facility_name(master)
        if master_normalized == normalized:
            return True
        if len(normalized) >= MIN_MASTER_OVERLAP and normalized in master_normalized:
            return True
        if len(master_normalized) >= MIN_MASTER_OVERLAP and master_normalized in normalized:
            return True
    return False
