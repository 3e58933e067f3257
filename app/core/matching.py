# app/core/matching.py

"""
Facility name matching.

Deterministic heuristics that decide whether two hand-typed facility
names refer to the same facility. Strategies run from safest to most
permissive and the first one that succeeds wins:

1. Exact normalized match
2. Core name match (facility type suffixes removed)
3. Whole-name prefix / substring
4. Word-by-word match (positional, then any order)
5. Leading-words abbreviation
"""

import re
from typing import Optional

from app.core.normalizers import normalize_facility_name, split_facility_type

# Words shorter than this are ignored in word-level strategies ("of", "st")
MIN_WORD_LENGTH = 3

# Shortest name/core allowed to match as a substring of another
MIN_SUBSTRING_LENGTH = 4


# ============================================
# Known administrative variations
# ============================================

# Same facility filed under a different administrative classification.
# Each entry is checked in both name orders.
KNOWN_VARIATIONS: list[tuple[str, str, str]] = [
    (r"district\s+hospital", r"sub[\s-]+county\s+hospital", "District / Sub County"),
    (r"district\s+hospital", r"county\s+referral\s+hospital", "District / County Referral"),
]

_VARIATION_PATTERNS = [
    (re.compile(pattern_a, re.IGNORECASE), re.compile(pattern_b, re.IGNORECASE), comment)
    for pattern_a, pattern_b, comment in KNOWN_VARIATIONS
]


def facilities_match(name1: str, name2: str) -> bool:
    """
    Check whether two facility names refer to the same facility.

    Examples:
    - "Ober Kamoth Sub County Hospital" matches "Ober Kamoth Health Centre"
    - "Star Mater" matches "Star Maternity & Nursing Home"
    - "Aga Khan Hospital (Kisumu)" matches "Aga Khan Hospital"
    - "Kisumu County Hospital" does not match "Kisumu General Hospital"
    """
    normalized1 = normalize_facility_name(name1)
    normalized2 = normalize_facility_name(name2)

    # Strategy 1: Exact match
    if normalized1 == normalized2:
        return True

    # An empty name is not a prefix of everything
    if not normalized1 or not normalized2:
        return False

    # Strategy 2: Core names
    if _core_names_match(name1, name2):
        return True

    # Order by length, ties by text, so the result does not depend on argument order
    shorter, longer = sorted((normalized1, normalized2), key=lambda s: (len(s), s))

    # Strategy 3: Whole-name prefix / substring
    if longer.startswith(shorter):
        return True
    if len(shorter) >= MIN_SUBSTRING_LENGTH and shorter in longer:
        return True

    shorter_words = [w for w in shorter.split() if len(w) >= MIN_WORD_LENGTH]
    longer_words = longer.split()

    # Strategy 4: Word-by-word
    if _words_match(shorter_words, longer_words):
        return True

    # Strategy 5: Leading-words abbreviation ("Ober Kamo" -> "Ober Kamoth ...")
    return _leading_words_match(shorter_words, longer_words)


def facilities_match_with_variation(name1: str, name2: str) -> Optional[str]:
    """
    Detect the same facility under a different administrative type.

    "Manga District Hospital" vs "Manga Sub County Hospital" gives
    "District / Sub County". Returns None when the first word differs or
    the type pair is not a known variation.
    """
    words1 = normalize_facility_name(name1).split()
    words2 = normalize_facility_name(name2).split()

    if len(words1) < 2 or len(words2) < 2:
        return None

    # First word is the facility's own name or location
    if words1[0] != words2[0]:
        return None

    type1 = " ".join(words1[1:])
    type2 = " ".join(words2[1:])

    for pattern_a, pattern_b, comment in _VARIATION_PATTERNS:
        if pattern_a.search(type1) and pattern_b.search(type2):
            return comment
        if pattern_b.search(type1) and pattern_a.search(type2):
            return comment

    return None


def _core_names_match(name1: str, name2: str) -> bool:
    """Compare names with their facility type suffixes removed."""
    core1, type1 = split_facility_type(name1)
    core2, type2 = split_facility_type(name2)

    if not core1 or not core2:
        return False

    # Two different hospital classifications in one town are different hospitals
    if type1 and type2 and type1[1] == "hospital" and type2[1] == "hospital" and type1[0] != type2[0]:
        return False

    if core1 == core2:
        return True

    # Abbreviations
    if len(core1) >= MIN_SUBSTRING_LENGTH and core1 in core2:
        return True
    if len(core2) >= MIN_SUBSTRING_LENGTH and core2 in core1:
        return True

    # Truncations
    return core1.startswith(core2) or core2.startswith(core1)


def _word_overlap(word1: str, word2: str) -> bool:
    """Either word is a prefix of, or contained in, the other."""
    return word1 in word2 or word2 in word1


def _words_match(shorter_words: list[str], longer_words: list[str]) -> bool:
    if not 1 <= len(shorter_words) <= len(longer_words):
        return False

    # Same position ("Mater" -> "Maternity")
    matched_words = sum(
        1 for i, word in enumerate(shorter_words)
        if _word_overlap(word, longer_words[i])
    )
    if matched_words == len(shorter_words):
        return True

    # Any position, for reordered names
    if len(shorter_words) >= 2 and all(
        any(_word_overlap(word, other) for other in longer_words)
        for word in shorter_words
    ):
        return True

    return False


def _leading_words_match(shorter_words: list[str], longer_words: list[str]) -> bool:
    if len(shorter_words) < 2 or len(longer_words) < len(shorter_words):
        return False

    return all(
        _word_overlap(word, longer_words[i])
        for i, word in enumerate(shorter_words)
    )
