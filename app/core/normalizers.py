# app/core/normalizers.py

"""
Facility name normalization utilities.

Ensures consistent name format regardless of who typed it or which
system it came from.
"""

import re
from typing import Optional


# Apostrophe variants are deleted outright so "Joseph's" == "Josephs"
_APOSTROPHES = re.compile(r"['’`]")
_WHITESPACE = re.compile(r"\s+")
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)\s*")


# ============================================
# Facility-type suffixes
# ============================================

# Ordered most specific first; the first pattern that matches is the one
# stripped. Each entry is (label, tier, pattern).
FACILITY_TYPE_SUFFIXES: list[tuple[str, str, str]] = [
    ("sub county referral hospital", "hospital", r"sub[\s-]+county\s+referral\s+hospital"),
    ("county referral hospital", "hospital", r"county\s+referral\s+hospital"),
    ("sub county hospital", "hospital", r"sub[\s-]+county\s+hospital"),
    ("sub district hospital", "hospital", r"sub[\s-]+district\s+hospital"),
    ("county hospital", "hospital", r"county\s+hospital"),
    ("referral hospital", "hospital", r"referral\s+hospital"),
    ("general hospital", "hospital", r"general\s+hospital"),
    ("district hospital", "hospital", r"district\s+hospital"),
    ("hospital", "hospital", r"hospital"),
    ("rural health training centre", "facility", r"rural\s+health\s+training\s+centre"),
    ("rural health training center", "facility", r"rural\s+health\s+training\s+center"),
    ("health training centre", "facility", r"health\s+training\s+centre"),
    ("health training center", "facility", r"health\s+training\s+center"),
    ("health centres", "facility", r"health\s+centres"),
    ("health centers", "facility", r"health\s+centers"),
    ("health centre", "facility", r"health\s+centre"),
    ("health center", "facility", r"health\s+center"),
    ("medical centre", "facility", r"medical\s+centre"),
    ("medical center", "facility", r"medical\s+center"),
    ("maternity & nursing home", "facility", r"maternity\s+&\s+nursing\s+home"),
    ("nursing and maternity home", "facility", r"nursing\s+and\s+maternity\s+home"),
    ("nursing & maternity home", "facility", r"nursing\s+&\s+maternity\s+home"),
    ("nursing home", "facility", r"nursing\s+home"),
    ("maternity home", "facility", r"maternity\s+home"),
    ("dispensaries", "facility", r"dispensaries"),
    ("dispensary", "facility", r"dispensary"),
    ("health clinic", "facility", r"health\s+clinic"),
    ("medical clinic", "facility", r"medical\s+clinic"),
    ("clinic", "facility", r"clinic"),
]

_SUFFIX_PATTERNS = [
    (label, tier, re.compile(rf"\s*\b{pattern}\b\s*", re.IGNORECASE))
    for label, tier, pattern in FACILITY_TYPE_SUFFIXES
]


def normalize_facility_name(name: Optional[str]) -> str:
    """
    Normalize a facility name for comparison.

    - Trim
    - Lowercase
    - Remove apostrophes (', ’, `)
    - Collapse whitespace
    """
    if not name:
        return ""

    name = name.strip().lower()
    name = _APOSTROPHES.sub("", name)
    name = _WHITESPACE.sub(" ", name).strip()
    return name


def split_facility_type(name: Optional[str]) -> tuple[str, Optional[tuple[str, str]]]:
    """
    Split a facility name into its core name and the facility type removed.

    Returns (core_name, (label, tier)) or (core_name, None) when no known
    facility type was found. Parenthesized location qualifiers such as
    "Ikobe Health Centre(Manga)" are dropped before the suffix lookup.
    """
    core = normalize_facility_name(name)
    core = _PARENTHETICAL.sub(" ", core).strip()

    facility_type = None
    for label, tier, pattern in _SUFFIX_PATTERNS:
        if pattern.search(core):
            core = pattern.sub(" ", core)
            facility_type = (label, tier)
            break

    core = _WHITESPACE.sub(" ", core).strip()
    return core, facility_type


def extract_core_facility_name(name: Optional[str]) -> str:
    """
    Extract the identity part of a facility name.

    "Ober Kamoth Sub County Hospital" and "Ober Kamoth Health Centre" both
    give "ober kamoth". An empty result means nothing was left to compare.
    """
    core, _ = split_facility_type(name)
    return core


# ============================================
# List helpers
# ============================================

_LIST_SEPARATORS = re.compile(r"[\n,;]")


def parse_facility_list(text: Optional[str]) -> list[str]:
    """Split pasted text on newlines, commas and semicolons."""
    if not text:
        return []

    return [piece.strip() for piece in _LIST_SEPARATORS.split(text) if piece.strip()]


def deduplicate_facilities(facilities: list[str]) -> list[str]:
    """
    Remove duplicate facility names.

    Keeps the first spelling seen for each normalized name, trimmed.
    """
    seen: set[str] = set()
    result: list[str] = []

    for facility in facilities:
        key = normalize_facility_name(facility)
        if key in seen:
            continue
        seen.add(key)
        result.append(facility.strip())

    return result
