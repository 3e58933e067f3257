# app/core/classification.py

"""
Issue classification for support tickets.

Sorts a ticket's free-text server condition into a server or network issue.
"""

from app.models import IssueType


# Network keywords are checked first; a dead SIM on a working server is a network issue
NETWORK_KEYWORDS = [
    "network",
    "simcard",
    "sim card",
    "connect",
    "connection",
    "tablet",
    "wifi",
    "internet",
]

SERVER_KEYWORDS = [
    "server",
    "emr",
    "boot",
    "power",
    "ssd",
    "hardware",
]


def classify_issue_type(condition: str | None) -> IssueType:
    """
    Classify a server condition as a "server" or "network" issue.

    Anything unrecognised is treated as a server issue.
    """
    if not condition:
        return "server"

    lower = condition.lower()

    if any(keyword in lower for keyword in NETWORK_KEYWORDS):
        return "network"

    if any(keyword in lower for keyword in SERVER_KEYWORDS):
        return "server"

    return "server"
