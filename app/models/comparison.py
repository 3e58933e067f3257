# app/models/comparison.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.facility import SystemType, Location


# ============================================
# Reconciliation buckets
# ============================================

class FacilityComment(BaseModel):
    """A facility name with an explanation attached."""

    facility: str
    comment: str


class ComparisonSummary(BaseModel):
    """Counts for one system/location comparison."""

    total_master: int
    total_reported: int
    matched: int
    matched_with_comment: int
    missing: int
    unmatched_reported: int
    progress: float = Field(description="Percent of master facilities that reported")


# ============================================
# Comparison History
# ============================================

class ComparisonHistory(BaseModel):
    """A comparison run as stored in the database."""

    id: Optional[str] = None
    system: SystemType
    location: Location
    week: Optional[str] = None
    week_date: Optional[date] = None

    uploaded_facilities: list[str] = Field(default_factory=list)
    matched_facilities: list[str] = Field(default_factory=list)
    matched_with_comment: list[FacilityComment] = Field(default_factory=list)
    missing_facilities: list[str] = Field(default_factory=list)
    unmatched_facilities: list[FacilityComment] = Field(default_factory=list)

    matched_count: int = 0
    missing_count: int = 0
    unmatched_count: int = 0

    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True
