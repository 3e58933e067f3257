# app/models/ticket.py

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

from app.models.facility import Location


TicketStatus = Literal["open", "in-progress", "resolved"]
IssueType = Literal["server", "network"]


# ============================================
# Ticket
# ============================================

class Ticket(BaseModel):
    """A support ticket as stored in the database."""

    id: str
    facility_name: str
    server_condition: str
    problem: str
    solution: Optional[str] = None
    status: TicketStatus = "open"
    location: Optional[Location] = None
    server_type: Optional[str] = None
    issue_type: Optional[IssueType] = None
    week: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TicketCreate(BaseModel):
    """New ticket from the tickets page."""

    facility_name: str = Field(min_length=1)
    server_condition: str = Field(min_length=1)
    problem: str = Field(min_length=1)
    solution: Optional[str] = None
    location: Optional[Location] = None
    status: TicketStatus = "open"
    issue_type: Optional[IssueType] = None
    week: Optional[str] = None


class TicketUpdate(BaseModel):
    """Partial ticket update."""

    facility_name: Optional[str] = Field(default=None, min_length=1)
    server_condition: Optional[str] = Field(default=None, min_length=1)
    problem: Optional[str] = Field(default=None, min_length=1)
    solution: Optional[str] = None
    location: Optional[Location] = None
    status: Optional[TicketStatus] = None
    issue_type: Optional[IssueType] = None
    week: Optional[str] = None
    resolved_at: Optional[datetime] = None
