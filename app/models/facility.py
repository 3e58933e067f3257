# app/models/facility.py

from datetime import datetime
from typing import Optional, Literal, get_args
from pydantic import BaseModel, Field


SystemType = Literal["NDWH", "CBS"]
Location = Literal["Kakamega", "Vihiga", "Nyamira", "Kisumu"]

SYSTEMS: tuple[str, ...] = get_args(SystemType)
LOCATIONS: tuple[str, ...] = get_args(Location)


# ============================================
# Facility
# ============================================

class Facility(BaseModel):
    """A facility as stored in the database."""

    id: str
    name: str
    system: SystemType
    location: Location
    is_master: bool = True

    subcounty: Optional[str] = None
    sublocation: Optional[str] = None
    server_type: Optional[str] = None
    facility_group: Optional[str] = None
    simcard_count: Optional[int] = None
    has_lan: bool = False

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FacilityCreate(BaseModel):
    """Facility data from an upload or the facility manager."""

    name: str = Field(min_length=1)
    subcounty: Optional[str] = None
    sublocation: Optional[str] = None
    server_type: Optional[str] = None
    facility_group: Optional[str] = None
    simcard_count: Optional[int] = Field(default=None, ge=0)
    has_lan: bool = False


class FacilityUpdate(BaseModel):
    """Partial update for a single facility."""

    name: Optional[str] = Field(default=None, min_length=1)
    subcounty: Optional[str] = None
    sublocation: Optional[str] = None
    server_type: Optional[str] = None
    facility_group: Optional[str] = None
    simcard_count: Optional[int] = Field(default=None, ge=0)
    has_lan: Optional[bool] = None


# ============================================
# Name validation
# ============================================

class FacilityNameValidation(BaseModel):
    """Whether an imported cell looks like a facility name."""

    is_valid: bool
    reason: Optional[str] = None
