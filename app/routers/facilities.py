# app/routers/facilities.py

"""
Facility routes.

CRUD for master and reported facility lists, plus bulk import.
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field
from typing import Optional

from app.database import (
    get_facilities,
    get_facility_names,
    create_facilities,
    replace_facilities,
    update_facility,
    delete_facilities,
)
from app.core.normalizers import (
    normalize_facility_name,
    parse_facility_list,
    deduplicate_facilities,
)
from app.core.matching import facilities_match
from app.core.validation import validate_facility_name
from app.models import SystemType, Location, FacilityCreate, FacilityUpdate

router = APIRouter()


# ============================================
# Request/Response Models
# ============================================

class CreateFacilitiesRequest(BaseModel):
    system: SystemType
    location: Location
    facilities: list[FacilityCreate]
    is_master: bool = True


class ImportFacilitiesRequest(BaseModel):
    system: SystemType
    location: Location
    text: str = Field(min_length=1)


class ReplaceFacilitiesRequest(BaseModel):
    system: SystemType
    location: Location
    facilities: list[str]
    is_master: bool = False


class RejectedFacility(BaseModel):
    name: str
    reason: str


class ImportResponse(BaseModel):
    success: bool
    imported: int
    skipped: list[str]
    rejected: list[RejectedFacility]


# ============================================
# Get Facilities
# ============================================

@router.get("")
async def list_facilities(
    system: SystemType = Query(...),
    location: Location = Query(...),
    is_master: Optional[bool] = Query(None, description="Filter master or reported"),
):
    """
    List facilities for a system/location.
    """
    facilities = await get_facilities(system, location, is_master)

    return {
        "facilities": facilities,
        "count": len(facilities),
    }


# ============================================
# Create / Import
# ============================================

@router.post("")
async def add_facilities(request: CreateFacilitiesRequest):
    """
    Bulk-create facilities.

    Names already stored for this system/location are skipped, as are
    repeats within the request.
    """
    existing = await get_facility_names(request.system, request.location, request.is_master)
    seen = {normalize_facility_name(name) for name in existing}

    rows = []
    for facility in request.facilities:
        key = normalize_facility_name(facility.name)
        if not key or key in seen:
            continue
        seen.add(key)

        row = facility.model_dump()
        row["name"] = facility.name.strip()
        row.update(system=request.system, location=request.location, is_master=request.is_master)
        rows.append(row)

    if not rows:
        return {"success": True, "count": 0, "message": "All facilities already exist"}

    count = await create_facilities(rows)
    return {"success": True, "count": count}


@router.post("/import", response_model=ImportResponse)
async def import_facilities(request: ImportFacilitiesRequest):
    """
    Import master facilities from pasted text.

    1. Splits the text into names
    2. Rejects headers, administrative divisions and junk
    3. Skips names that already match a master facility
    4. Saves the rest
    """
    master = await get_facility_names(request.system, request.location, True)

    accepted: list[str] = []
    skipped: list[str] = []
    rejected: list[RejectedFacility] = []

    for name in deduplicate_facilities(parse_facility_list(request.text)):
        validation = validate_facility_name(name, master)
        if not validation.is_valid:
            rejected.append(RejectedFacility(name=name, reason=validation.reason or "Invalid"))
            continue

        if any(facilities_match(existing, name) for existing in master + accepted):
            skipped.append(name)
            continue

        accepted.append(name)

    rows = [
        {"name": name, "system": request.system, "location": request.location, "is_master": True}
        for name in accepted
    ]
    imported = await create_facilities(rows)

    return ImportResponse(success=True, imported=imported, skipped=skipped, rejected=rejected)


# ============================================
# Replace / Update / Delete
# ============================================

@router.put("")
async def set_facilities(request: ReplaceFacilitiesRequest):
    """
    Replace a facility list (normally the reported list).
    """
    facilities = deduplicate_facilities([f for f in request.facilities if f.strip()])
    count = await replace_facilities(request.system, request.location, facilities, request.is_master)

    return {"success": True, "count": count}


@router.patch("/{facility_id}")
async def edit_facility(facility_id: str, request: FacilityUpdate):
    """
    Update a single facility.
    """
    updates = request.model_dump(exclude_unset=True)
    if "name" in updates and updates["name"] is not None:
        updates["name"] = updates["name"].strip()

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    facility = await update_facility(facility_id, updates)
    if not facility:
        raise HTTPException(status_code=404, detail="Facility not found")

    return {"success": True, "facility": facility}


@router.delete("")
async def remove_facilities(
    system: SystemType = Query(...),
    location: Location = Query(...),
    is_master: Optional[bool] = Query(None),
    id: Optional[str] = Query(None, description="Delete one facility by id"),
    name: Optional[str] = Query(None, description="Delete facilities by exact name"),
):
    """
    Delete facilities for a system/location.
    """
    count = await delete_facilities(system, location, is_master, facility_id=id, name=name)

    return {"success": True, "count": count}
