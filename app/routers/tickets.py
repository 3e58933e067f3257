# app/routers/tickets.py

"""
Support ticket routes.

Tickets record server and network problems at a facility. New tickets pick
up the facility's server type from the master list.
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from app.database import (
    get_master_facilities,
    get_tickets,
    create_ticket,
    update_ticket,
    delete_ticket,
)
from app.core.matching import facilities_match
from app.core.classification import classify_issue_type
from app.models import Location, TicketStatus, TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)
router = APIRouter()


def _clean(value: Optional[str]) -> Optional[str]:
    """Trim, turning blank strings into None."""
    if value is None:
        return None
    return value.strip() or None


async def _lookup_server_type(location: str, facility_name: str) -> Optional[str]:
    """Server type of the first master facility matching the ticket's facility."""
    try:
        facilities = await get_master_facilities(location)
    except Exception as e:
        logger.warning(f"Failed to load master facilities for {location}: {e}")
        return None

    for facility in facilities:
        if facilities_match(facility["name"], facility_name):
            return facility.get("server_type")

    return None


# ============================================
# List / Create
# ============================================

@router.get("")
async def list_tickets(
    status: Optional[TicketStatus] = Query(None),
    location: Optional[Location] = Query(None),
    facility_name: Optional[str] = Query(None, description="Substring of the facility name"),
):
    """
    List tickets, newest first.
    """
    tickets = await get_tickets(status=status, location=location, facility_name=facility_name)

    return {
        "tickets": tickets,
        "count": len(tickets),
    }


@router.post("")
async def open_ticket(request: TicketCreate):
    """
    Create a ticket.

    1. Classifies the issue from the server condition when no type is given
    2. Looks up the facility's server type in the location's master list
    3. Saves the ticket
    """
    facility_name = request.facility_name.strip()
    server_condition = request.server_condition.strip()
    problem = request.problem.strip()

    if not facility_name or not server_condition or not problem:
        raise HTTPException(
            status_code=400,
            detail="Facility name, server condition, and problem are required"
        )

    server_type = None
    if request.location:
        server_type = await _lookup_server_type(request.location, facility_name)

    row = {
        "facility_name": facility_name,
        "server_condition": server_condition,
        "problem": problem,
        "solution": _clean(request.solution),
        "location": request.location,
        "server_type": server_type,
        "issue_type": request.issue_type or classify_issue_type(server_condition),
        "week": _clean(request.week),
        "status": request.status,
        "resolved_at": datetime.now(timezone.utc).isoformat() if request.status == "resolved" else None,
    }

    ticket = await create_ticket(row)

    return {"success": True, "ticket": ticket}


# ============================================
# Update / Delete
# ============================================

@router.patch("/{ticket_id}")
async def edit_ticket(ticket_id: str, request: TicketUpdate):
    """
    Update a ticket.

    Moving a ticket to resolved stamps resolved_at (unless one is given);
    any other status clears it.
    """
    updates = request.model_dump(exclude_unset=True, mode="json")

    for field in ("facility_name", "server_condition", "problem"):
        if updates.get(field) is not None:
            updates[field] = updates[field].strip()
    for field in ("solution", "week"):
        if field in updates:
            updates[field] = _clean(updates[field])

    if "status" in updates:
        if updates["status"] != "resolved":
            updates["resolved_at"] = None
        elif not updates.get("resolved_at"):
            updates["resolved_at"] = datetime.now(timezone.utc).isoformat()

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    ticket = await update_ticket(ticket_id, updates)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    return {"success": True, "ticket": ticket}


@router.delete("/{ticket_id}")
async def remove_ticket(ticket_id: str):
    """
    Delete a ticket.
    """
    if not await delete_ticket(ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")

    return {"success": True}
