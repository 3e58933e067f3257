# app/models/__init__.py

from app.models.facility import (
    SystemType,
    Location,
    SYSTEMS,
    LOCATIONS,
    Facility,
    FacilityCreate,
    FacilityUpdate,
    FacilityNameValidation,
)
from app.models.comparison import (
    FacilityComment,
    ComparisonSummary,
    ComparisonHistory,
)
from app.models.ticket import (
    TicketStatus,
    IssueType,
    Ticket,
    TicketCreate,
    TicketUpdate,
)

__all__ = [
    # Facility
    "SystemType",
    "Location",
    "SYSTEMS",
    "LOCATIONS",
    "Facility",
    "FacilityCreate",
    "FacilityUpdate",
    "FacilityNameValidation",
    # Comparison
    "FacilityComment",
    "ComparisonSummary",
    "ComparisonHistory",
    # Ticket
    "TicketStatus",
    "IssueType",
    "Ticket",
    "TicketCreate",
    "TicketUpdate",
]
