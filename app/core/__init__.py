# app/core/__init__.py

from app.core.normalizers import (
    normalize_facility_name,
    extract_core_facility_name,
    parse_facility_list,
    deduplicate_facilities,
)
from app.core.matching import facilities_match, facilities_match_with_variation
from app.core.reconciliation import reconcile, ReconciliationResult, NOT_IN_MASTER_COMMENT
from app.core.validation import validate_facility_name
from app.core.classification import classify_issue_type
from app.core.reports import render_text_report, render_csv_report

__all__ = [
    "normalize_facility_name",
    "extract_core_facility_name",
    "parse_facility_list",
    "deduplicate_facilities",
    "facilities_match",
    "facilities_match_with_variation",
    "reconcile",
    "ReconciliationResult",
    "NOT_IN_MASTER_COMMENT",
    "validate_facility_name",
    "classify_issue_type",
    "render_text_report",
    "render_csv_report",
]
