# app/database.py

from datetime import date
from functools import lru_cache
from typing import Optional

from supabase import create_client, Client
from app.config import get_settings


@lru_cache()
def get_client() -> Client:
    """Admin client (bypasses RLS - use carefully)."""
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key
    )


# ============================================
# Facilities
# ============================================

async def get_facilities(
    system: str,
    location: str,
    is_master: Optional[bool] = None,
) -> list[dict]:
    """Get facilities for a system/location, ordered by name."""
    query = get_client().table("facilities").select("*").eq("system", system).eq("location", location)

    if is_master is not None:
        query = query.eq("is_master", is_master)

    response = query.order("name").execute()
    return response.data


async def get_facility_names(system: str, location: str, is_master: bool) -> list[str]:
    """Get just the facility names, in list order."""
    facilities = await get_facilities(system, location, is_master)
    return [f["name"] for f in facilities]


async def get_master_facilities(location: str) -> list[dict]:
    """Master facilities for a location across both systems."""
    response = (
        get_client().table("facilities")
        .select("*")
        .eq("location", location)
        .eq("is_master", True)
        .order("name")
        .execute()
    )
    return response.data


async def create_facilities(facilities: list[dict]) -> int:
    """Insert facilities."""
    if not facilities:
        return 0

    response = get_client().table("facilities").insert(facilities).execute()
    return len(response.data) if response.data else 0


async def replace_facilities(system: str, location: str, names: list[str], is_master: bool) -> int:
    """Replace every facility of one kind for a system/location."""
    (
        get_client().table("facilities")
        .delete()
        .eq("system", system)
        .eq("location", location)
        .eq("is_master", is_master)
        .execute()
    )

    rows = [
        {"name": name.strip(), "system": system, "location": location, "is_master": is_master}
        for name in names
    ]
    return await create_facilities(rows)


async def update_facility(facility_id: str, updates: dict) -> dict | None:
    """Update a facility."""
    response = get_client().table("facilities").update(updates).eq("id", facility_id).execute()
    return response.data[0] if response.data else None


async def delete_facilities(
    system: str,
    location: str,
    is_master: Optional[bool] = None,
    facility_id: Optional[str] = None,
    name: Optional[str] = None,
) -> int:
    """Delete facilities; narrowed to one by id or name when given."""
    query = get_client().table("facilities").delete().eq("system", system).eq("location", location)

    if is_master is not None:
        query = query.eq("is_master", is_master)
    if facility_id:
        query = query.eq("id", facility_id)
    elif name:
        query = query.eq("name", name)

    response = query.execute()
    return len(response.data) if response.data else 0


# ============================================
# Comparison history
# ============================================

async def save_comparison(comparison: dict) -> dict | None:
    """Save a comparison run."""
    response = get_client().table("comparison_history").insert(comparison).execute()
    return response.data[0] if response.data else None


async def get_comparison_history(
    system: Optional[str] = None,
    location: Optional[str] = None,
    from_date: Optional[date] = None,
    limit: int = 100,
) -> list[dict]:
    """Get comparison history, newest first."""
    query = get_client().table("comparison_history").select("*")

    if system:
        query = query.eq("system", system)
    if location:
        query = query.eq("location", location)
    if from_date:
        query = query.gte("timestamp", from_date.isoformat())

    response = query.order("timestamp", desc=True).limit(limit).execute()
    return response.data


# ============================================
# Tickets
# ============================================

async def get_tickets(
    status: Optional[str] = None,
    location: Optional[str] = None,
    facility_name: Optional[str] = None,
) -> list[dict]:
    """Get tickets, newest first."""
    query = get_client().table("tickets").select("*")

    if status:
        query = query.eq("status", status)
    if location:
        query = query.eq("location", location)
    if facility_name:
        query = query.ilike("facility_name", f"%{facility_name}%")

    response = query.order("created_at", desc=True).execute()
    return response.data


async def create_ticket(ticket: dict) -> dict | None:
    """Create a ticket."""
    response = get_client().table("tickets").insert(ticket).execute()
    return response.data[0] if response.data else None


async def update_ticket(ticket_id: str, updates: dict) -> dict | None:
    """Update a ticket."""
    response = get_client().table("tickets").update(updates).eq("id", ticket_id).execute()
    return response.data[0] if response.data else None


async def delete_ticket(ticket_id: str) -> bool:
    """Delete a ticket. Returns False when no row matched."""
    response = get_client().table("tickets").delete().eq("id", ticket_id).execute()
    return bool(response.data)
