# tests/test_api.py

"""
Tests for the HTTP routes, with the store replaced by in-memory fakes.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers import facilities, comparisons, tickets


MASTER = [
    "Nyamira County Referral Hospital",
    "Manga Sub-County Hospital",
    "Keroka Sub-County Hospital",
]


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def store(monkeypatch):
    """Fake facility and comparison store shared by both routers."""
    state = {
        "master": list(MASTER),
        "reported": [],
        "created": [],
        "replaced": None,
        "comparisons": [],
    }

    async def get_facility_names(system, location, is_master):
        return list(state["master"] if is_master else state["reported"])

    async def create_facilities(rows):
        state["created"].extend(rows)
        return len(rows)

    async def replace_facilities(system, location, names, is_master):
        state["replaced"] = (system, location, names, is_master)
        return len(names)

    async def update_facility(facility_id, updates):
        if facility_id != "fac_1":
            return None
        return {"id": facility_id, **updates}

    async def save_comparison(record):
        state["comparisons"].append(record)
        return {"id": "cmp_1", **record}

    async def get_comparison_history(system=None, location=None, from_date=None, limit=100):
        return [c for c in state["comparisons"] if system is None or c["system"] == system][:limit]

    monkeypatch.setattr(facilities, "get_facility_names", get_facility_names)
    monkeypatch.setattr(facilities, "create_facilities", create_facilities)
    monkeypatch.setattr(facilities, "replace_facilities", replace_facilities)
    monkeypatch.setattr(facilities, "update_facility", update_facility)
    monkeypatch.setattr(comparisons, "get_facility_names", get_facility_names)
    monkeypatch.setattr(comparisons, "save_comparison", save_comparison)
    monkeypatch.setattr(comparisons, "get_comparison_history", get_comparison_history)

    return state


# ============================================
# Health
# ============================================

class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        data = client.get("/ready").json()
        assert data["status"] == "ready"
        assert data["checks"]["database"] == "configured"

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Facility Reporting API"


# ============================================
# Comparisons
# ============================================

class TestComparisons:
    """Test the comparison endpoints."""

    def test_compare_uploaded_list(self, client, store):
        response = client.post("/comparisons", json={
            "system": "CBS",
            "location": "Nyamira",
            "reported": ["nyamira county referral hospital", "Manga District Hospital", "Unknown Clinic XYZ"],
            "week": "Week 10",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["matched"] == ["Nyamira County Referral Hospital"]
        assert data["matched_with_comment"][0]["comment"] == "District / Sub County"
        assert data["missing"] == ["Keroka Sub-County Hospital"]
        assert data["unmatched_reported"][0]["facility"] == "Unknown Clinic XYZ"
        assert data["comparison"]["id"] == "cmp_1"

        saved = store["comparisons"][0]
        assert saved["matched_count"] == 2
        assert saved["unmatched_count"] == 1
        assert saved["week"] == "Week 10"

    def test_compare_pasted_text(self, client, store):
        response = client.post("/comparisons", json={
            "system": "NDWH",
            "location": "Nyamira",
            "text": "Keroka Sub-County Hospital\nKeroka Sub-County Hospital",
            "persist": False,
        })

        data = response.json()
        assert data["matched"] == ["Keroka Sub-County Hospital"]
        assert len(data["unmatched_reported"]) == 1
        assert data["comparison"] is None
        assert store["comparisons"] == []

    def test_compare_stored_reported_list(self, client, store):
        store["reported"] = ["Manga District Hospital"]

        data = client.post("/comparisons", json={"system": "NDWH", "location": "Nyamira"}).json()

        assert data["summary"]["matched_with_comment"] == 1
        assert data["summary"]["missing"] == 2

    def test_persistence_failure_does_not_fail_request(self, client, store, monkeypatch):
        async def broken_save(record):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(comparisons, "save_comparison", broken_save)

        response = client.post("/comparisons", json={
            "system": "NDWH", "location": "Nyamira", "reported": ["Keroka Sub-County Hospital"],
        })

        assert response.status_code == 200
        assert response.json()["comparison"] is None

    def test_nothing_to_compare(self, client, store):
        store["master"] = []

        response = client.post("/comparisons", json={"system": "NDWH", "location": "Kisumu", "reported": []})

        assert response.status_code == 400

    def test_unknown_location_rejected(self, client, store):
        response = client.post("/comparisons", json={"system": "NDWH", "location": "Mombasa", "reported": []})

        assert response.status_code == 422

    def test_history(self, client, store):
        client.post("/comparisons", json={"system": "CBS", "location": "Nyamira", "reported": ["Keroka"]})

        data = client.get("/comparisons", params={"system": "CBS"}).json()

        assert data["count"] == 1
        assert data["comparisons"][0]["location"] == "Nyamira"

    def test_check_match(self, client):
        data = client.post("/comparisons/match", json={
            "name_a": "Manga District Hospital",
            "name_b": "Manga Sub County Hospital",
        }).json()

        assert data["match"] is False
        assert data["variation"] == "District / Sub County"
        assert data["core"] == ["manga", "manga"]

    def test_csv_report(self, client, store):
        store["reported"] = ["nyamira county referral hospital"]

        response = client.get("/comparisons/report.csv", params={"system": "NDWH", "location": "Nyamira"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "facility-report-NDWH-Nyamira-" in response.headers["content-disposition"]
        assert "Keroka Sub-County Hospital" in response.text

    def test_text_report_covers_all_locations(self, client, store):
        response = client.get("/comparisons/report.txt", params={"system": "CBS"})

        assert response.status_code == 200
        for location in ("KAKAMEGA", "VIHIGA", "NYAMIRA", "KISUMU"):
            assert f"LOCATION: {location}" in response.text


# ============================================
# Facilities
# ============================================

class TestFacilities:
    """Test the facility store endpoints."""

    def test_import_from_text(self, client, store):
        store["master"] = ["Kisumu County Hospital"]
        text = "\n".join([
            "Facility Name",
            "Kisumu County Hospital",
            "Ahero Sub County Hospital",
            "Sub County",
            "ahero sub county hospital",
        ])

        response = client.post("/facilities/import", json={"system": "NDWH", "location": "Kisumu", "text": text})

        assert response.status_code == 200
        data = response.json()
        assert data["imported"] == 1
        assert data["skipped"] == ["Kisumu County Hospital"]
        assert [r["name"] for r in data["rejected"]] == ["Facility Name", "Sub County"]
        assert store["created"][0]["name"] == "Ahero Sub County Hospital"
        assert store["created"][0]["is_master"] is True

    def test_bulk_create_skips_existing(self, client, store):
        response = client.post("/facilities", json={
            "system": "NDWH",
            "location": "Nyamira",
            "facilities": [
                {"name": "nyamira county referral hospital"},
                {"name": " Ekerenyo Sub County Hospital ", "subcounty": "Nyamira North"},
                {"name": "EKERENYO SUB COUNTY HOSPITAL"},
            ],
        })

        assert response.json()["count"] == 1
        assert store["created"][0]["name"] == "Ekerenyo Sub County Hospital"
        assert store["created"][0]["subcounty"] == "Nyamira North"

    def test_bulk_create_nothing_new(self, client, store):
        response = client.post("/facilities", json={
            "system": "NDWH", "location": "Nyamira", "facilities": [{"name": "Keroka Sub-County Hospital"}],
        })

        assert response.json()["count"] == 0

    def test_replace_reported_list(self, client, store):
        response = client.put("/facilities", json={
            "system": "CBS",
            "location": "Vihiga",
            "facilities": ["Vihiga County Referral Hospital", "vihiga county referral hospital", " "],
        })

        assert response.json()["count"] == 1
        assert store["replaced"] == ("CBS", "Vihiga", ["Vihiga County Referral Hospital"], False)

    def test_update_facility(self, client, store):
        response = client.patch("/facilities/fac_1", json={"name": " Manga Sub County Hospital "})

        assert response.status_code == 200
        assert response.json()["facility"]["name"] == "Manga Sub County Hospital"

    def test_update_missing_facility(self, client, store):
        response = client.patch("/facilities/nope", json={"name": "Manga"})

        assert response.status_code == 404

    def test_list_requires_system_and_location(self, client):
        response = client.get("/facilities", params={"system": "NDWH"})

        assert response.status_code == 422


# ============================================
# Tickets
# ============================================

@pytest.fixture
def ticket_store(monkeypatch):
    """Fake ticket store plus a master list carrying server types."""
    state = {
        "master": [
            {"name": "Keroka Sub-County Hospital", "server_type": "HP ProLiant"},
            {"name": "Manga Sub-County Hospital", "server_type": "Dell PowerEdge"},
        ],
        "created": [],
        "updates": [],
        "filters": None,
    }

    async def get_master_facilities(location):
        return list(state["master"])

    async def get_tickets(status=None, location=None, facility_name=None):
        state["filters"] = (status, location, facility_name)
        return [{"id": "tkt_1", "facility_name": "Manga Sub-County Hospital", "status": "open"}]

    async def create_ticket(row):
        state["created"].append(row)
        return {"id": "tkt_1", **row}

    async def update_ticket(ticket_id, updates):
        state["updates"].append(updates)
        if ticket_id != "tkt_1":
            return None
        return {"id": ticket_id, **updates}

    async def delete_ticket(ticket_id):
        return ticket_id == "tkt_1"

    monkeypatch.setattr(tickets, "get_master_facilities", get_master_facilities)
    monkeypatch.setattr(tickets, "get_tickets", get_tickets)
    monkeypatch.setattr(tickets, "create_ticket", create_ticket)
    monkeypatch.setattr(tickets, "update_ticket", update_ticket)
    monkeypatch.setattr(tickets, "delete_ticket", delete_ticket)

    return state


class TestTickets:
    """Test the support ticket endpoints."""

    def test_create_looks_up_server_type(self, client, ticket_store):
        response = client.post("/tickets", json={
            "facility_name": " Manga ",
            "server_condition": "Server not booting",
            "problem": "EMR down since Monday",
            "location": "Nyamira",
            "week": "Week 10",
        })

        assert response.status_code == 200
        row = ticket_store["created"][0]
        assert row["facility_name"] == "Manga"
        assert row["server_type"] == "Dell PowerEdge"
        assert row["issue_type"] == "server"
        assert row["status"] == "open"
        assert row["resolved_at"] is None
        assert row["solution"] is None
        assert row["week"] == "Week 10"

    def test_create_without_master_match(self, client, ticket_store):
        client.post("/tickets", json={
            "facility_name": "Unknown Clinic XYZ",
            "server_condition": "Simcard has no bundles",
            "problem": "Cannot upload",
            "location": "Nyamira",
        })

        row = ticket_store["created"][0]
        assert row["server_type"] is None
        assert row["issue_type"] == "network"

    def test_create_without_location_skips_lookup(self, client, ticket_store):
        client.post("/tickets", json={
            "facility_name": "Manga",
            "server_condition": "Power outage",
            "problem": "UPS failed",
            "issue_type": "network",
        })

        row = ticket_store["created"][0]
        assert row["server_type"] is None
        assert row["issue_type"] == "network"

    def test_create_resolved_stamps_resolved_at(self, client, ticket_store):
        client.post("/tickets", json={
            "facility_name": "Keroka",
            "server_condition": "SSD failure",
            "problem": "Disk replaced",
            "status": "resolved",
        })

        assert ticket_store["created"][0]["resolved_at"] is not None

    def test_create_requires_fields(self, client, ticket_store):
        response = client.post("/tickets", json={
            "facility_name": "Manga",
            "server_condition": "   ",
            "problem": "EMR down",
        })

        assert response.status_code == 400
        assert ticket_store["created"] == []

    def test_list_filters(self, client, ticket_store):
        data = client.get("/tickets", params={"status": "open", "location": "Nyamira", "facility_name": "Manga"}).json()

        assert data["count"] == 1
        assert ticket_store["filters"] == ("open", "Nyamira", "Manga")

    def test_list_rejects_unknown_status(self, client, ticket_store):
        response = client.get("/tickets", params={"status": "closed"})

        assert response.status_code == 422

    def test_resolve_stamps_resolved_at(self, client, ticket_store):
        response = client.patch("/tickets/tkt_1", json={"status": "resolved", "solution": "Replaced SSD"})

        assert response.status_code == 200
        updates = ticket_store["updates"][0]
        assert updates["resolved_at"] is not None
        assert updates["solution"] == "Replaced SSD"

    def test_resolve_keeps_given_resolved_at(self, client, ticket_store):
        client.patch("/tickets/tkt_1", json={"status": "resolved", "resolved_at": "2025-03-10T09:30:00"})

        assert ticket_store["updates"][0]["resolved_at"] == "2025-03-10T09:30:00"

    def test_reopen_clears_resolved_at(self, client, ticket_store):
        client.patch("/tickets/tkt_1", json={"status": "in-progress"})

        assert ticket_store["updates"][0]["status"] == "in-progress"
        assert ticket_store["updates"][0]["resolved_at"] is None

    def test_update_blank_solution_clears_it(self, client, ticket_store):
        client.patch("/tickets/tkt_1", json={"solution": "  "})

        assert ticket_store["updates"][0] == {"solution": None}

    def test_update_missing_ticket(self, client, ticket_store):
        response = client.patch("/tickets/nope", json={"problem": "Still down"})

        assert response.status_code == 404

    def test_update_nothing(self, client, ticket_store):
        response = client.patch("/tickets/tkt_1", json={})

        assert response.status_code == 400

    def test_delete(self, client, ticket_store):
        assert client.delete("/tickets/tkt_1").json() == {"success": True}
        assert client.delete("/tickets/nope").status_code == 404
