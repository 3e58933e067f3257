# app/routers/comparisons.py

"""
Comparison routes.

Runs the reconciliation engine against the master list and keeps a
history of comparison runs for the weekly trend view.
"""

import logging
from datetime import date, datetime
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field
from typing import Optional

from app.database import (
    get_facility_names,
    save_comparison,
    get_comparison_history,
)
from app.core.normalizers import normalize_facility_name, extract_core_facility_name, parse_facility_list
from app.core.matching import facilities_match, facilities_match_with_variation
from app.core.reconciliation import reconcile, ReconciliationResult
from app.core.reports import render_text_report, render_csv_report
from app.models import SystemType, Location, LOCATIONS, ComparisonHistory
from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter()


class ComparisonRequest(BaseModel):
    system: SystemType
    location: Location
    reported: Optional[list[str]] = Field(None, description="Reported names; defaults to the stored reported list")
    text: Optional[str] = Field(None, description="Pasted reported names, one per line")
    week: Optional[str] = None
    week_date: Optional[date] = None
    persist: bool = True


class MatchRequest(BaseModel):
    name_a: str
    name_b: str


# ============================================
# Helpers
# ============================================

def _master_system(system: str) -> str:
    return "NDWH" if settings.use_ndwh_master else system


async def _reconcile_stored(system: str, location: str) -> ReconciliationResult:
    """Reconcile the stored master and reported lists for one location."""
    master = await get_facility_names(_master_system(system), location, True)
    reported = await get_facility_names(system, location, False)
    return reconcile(master, reported)


# ============================================
# Main Comparison Endpoint
# ============================================

@router.post("")
async def run_comparison(request: ComparisonRequest):
    """
    Compare reported facilities with the master list.

    1. Takes the reported list from the request, the pasted text, or the store
    2. Runs the reconciliation engine
    3. Saves the run to comparison history
    """
    if request.reported is not None:
        reported = [name.strip() for name in request.reported if name.strip()]
    elif request.text is not None:
        reported = parse_facility_list(request.text)
    else:
        reported = await get_facility_names(request.system, request.location, False)

    master = await get_facility_names(_master_system(request.system), request.location, True)

    if not master and not reported:
        raise HTTPException(
            status_code=400,
            detail="No facilities to compare. Add a master list or upload reported facilities first."
        )

    result = reconcile(master, reported)

    comparison = None
    if request.persist:
        record = ComparisonHistory(
            system=request.system,
            location=request.location,
            week=request.week,
            week_date=request.week_date,
            uploaded_facilities=reported,
            matched_facilities=result.reported,
            matched_with_comment=result.matched_with_comment,
            missing_facilities=result.missing,
            unmatched_facilities=result.unmatched_reported,
            matched_count=result.reported_count,
            missing_count=len(result.missing),
            unmatched_count=len(result.unmatched_reported),
        )
        try:
            comparison = await save_comparison(record.model_dump(mode="json", exclude_none=True))
        except Exception as e:
            logger.warning(f"Failed to save comparison for {request.system}/{request.location}: {e}")
            # Continue - persistence failure shouldn't fail the whole request

    return {
        "success": True,
        "system": request.system,
        "location": request.location,
        "comparison": comparison,
        **result.to_dict(),
    }


@router.post("/match")
async def check_match(request: MatchRequest):
    """
    Check a single pair of names without running a full comparison.
    """
    return {
        "match": facilities_match(request.name_a, request.name_b),
        "variation": facilities_match_with_variation(request.name_a, request.name_b),
        "normalized": [
            normalize_facility_name(request.name_a),
            normalize_facility_name(request.name_b),
        ],
        "core": [
            extract_core_facility_name(request.name_a),
            extract_core_facility_name(request.name_b),
        ],
    }


# ============================================
# Comparison History (for weekly trends)
# ============================================

@router.get("")
async def list_comparisons(
    system: Optional[SystemType] = Query(None),
    location: Optional[Location] = Query(None),
    from_date: Optional[date] = Query(None, description="Only runs on or after this date"),
):
    """
    Get comparison history, newest first.
    """
    comparisons = await get_comparison_history(
        system=system,
        location=location,
        from_date=from_date,
        limit=settings.comparison_history_limit,
    )

    return {
        "comparisons": comparisons,
        "count": len(comparisons),
    }


# ============================================
# Report Exports
# ============================================

async def _results_by_location(system: str, location: Optional[str]) -> dict[str, ReconciliationResult]:
    locations = [location] if location else list(LOCATIONS)
    return {loc: await _reconcile_stored(system, loc) for loc in locations}


def _report_filename(system: str, location: Optional[str], extension: str) -> str:
    suffix = f"-{location}" if location else ""
    return f"facility-report-{system}{suffix}-{date.today().isoformat()}.{extension}"


@router.get("/report.txt", response_class=PlainTextResponse)
async def export_text_report(
    system: SystemType = Query(...),
    location: Optional[Location] = Query(None),
):
    """
    Plain-text reporting summary for one system.
    """
    results = await _results_by_location(system, location)
    text = render_text_report(system, results, generated_at=datetime.now())

    return PlainTextResponse(
        text,
        headers={"Content-Disposition": f'attachment; filename="{_report_filename(system, location, "txt")}"'},
    )


@router.get("/report.csv")
async def export_csv_report(
    system: SystemType = Query(...),
    location: Optional[Location] = Query(None),
):
    """
    Detailed CSV reporting export for one system.
    """
    results = await _results_by_location(system, location)

    return Response(
        content=render_csv_report(system, results),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{_report_filename(system, location, "csv")}"'},
    )
