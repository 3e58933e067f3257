# app/core/reconciliation.py

"""
Master vs reported facility reconciliation.

Partitions one system/location's master list and reported list into
matched, matched-with-variation, missing and unmatched-reported facilities.
Greedy and order-dependent by design: each master facility takes the
first eligible reported name, never the "best" one.
"""

import logging

from app.models import FacilityComment, ComparisonSummary
from app.core.matching import facilities_match, facilities_match_with_variation

logger = logging.getLogger(__name__)

NOT_IN_MASTER_COMMENT = "Not in master list - needs to be added to master list for proper tracking"


class ReconciliationResult:
    """Result of reconciling a master list against a reported list."""

    def __init__(self, total_master: int = 0, total_reported: int = 0):
        self.matched: list[str] = []
        self.matched_with_comment: list[FacilityComment] = []
        self.missing: list[str] = []
        self.unmatched_reported: list[FacilityComment] = []
        self.total_master = total_master
        self.total_reported = total_reported

    @property
    def reported(self) -> list[str]:
        """Master facilities that reported, plain matches first."""
        return self.matched + [m.facility for m in self.matched_with_comment]

    @property
    def reported_count(self) -> int:
        return len(self.matched) + len(self.matched_with_comment)

    @property
    def progress(self) -> float:
        """Percent of the master list that reported."""
        if not self.total_master:
            return 0.0
        return round(self.reported_count / self.total_master * 100, 1)

    @property
    def summary(self) -> ComparisonSummary:
        return ComparisonSummary(
            total_master=self.total_master,
            total_reported=self.total_reported,
            matched=len(self.matched),
            matched_with_comment=len(self.matched_with_comment),
            missing=len(self.missing),
            unmatched_reported=len(self.unmatched_reported),
            progress=self.progress,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "summary": self.summary.model_dump(),
            "matched": list(self.matched),
            "matched_with_comment": [m.model_dump() for m in self.matched_with_comment],
            "missing": list(self.missing),
            "unmatched_reported": [u.model_dump() for u in self.unmatched_reported],
        }


def reconcile(master: list[str], reported: list[str]) -> ReconciliationResult:
    """
    Main reconciliation function.

    Three passes over the two lists:
    1. Heuristic match: each master name takes the first unconsumed
       reported name that facilities_match() accepts
    2. Variation rescue: still-missing master names take the first
       unconsumed reported name with a known administrative variation
    3. Every reported name never consumed is unmatched

    Neither input list is modified.
    """
    result = ReconciliationResult(total_master=len(master), total_reported=len(reported))

    # Consumption is tracked per index, duplicates each get their own slot
    consumed = [False] * len(reported)

    # ============================================
    # Pass 1: Standard matching
    # ============================================
    unmatched_master: list[str] = []

    for name in master:
        index = _first_unconsumed(reported, consumed, lambda candidate: facilities_match(name, candidate))
        if index is None:
            unmatched_master.append(name)
            continue

        consumed[index] = True
        result.matched.append(name)

    # ============================================
    # Pass 2: Administrative variations
    # ============================================
    for name in unmatched_master:
        comment = None
        index = None

        for i, candidate in enumerate(reported):
            if consumed[i]:
                continue
            comment = facilities_match_with_variation(name, candidate)
            if comment:
                index = i
                break

        if index is None:
            result.missing.append(name)
            continue

        consumed[index] = True
        result.matched_with_comment.append(FacilityComment(facility=name, comment=comment))

    # ============================================
    # Pass 3: Reported but not in the master list
    # ============================================
    for i, candidate in enumerate(reported):
        if not consumed[i]:
            result.unmatched_reported.append(
                FacilityComment(facility=candidate, comment=NOT_IN_MASTER_COMMENT)
            )

    processed = len(result.matched) + len(result.matched_with_comment) + len(result.missing)
    if processed != len(master):
        logger.error(
            f"Reconciliation count mismatch: expected {len(master)} master facilities, "
            f"processed {processed}"
        )

    logger.debug(
        f"Reconciled {len(master)} master / {len(reported)} reported: "
        f"{len(result.matched)} matched, {len(result.matched_with_comment)} with variation, "
        f"{len(result.missing)} missing, {len(result.unmatched_reported)} unmatched"
    )

    return result


def _first_unconsumed(reported: list[str], consumed: list[bool], accepts) -> int | None:
    """Index of the first unconsumed reported name accepted, or None."""
    for i, candidate in enumerate(reported):
        if not consumed[i] and accepts(candidate):
            return i
    return None
