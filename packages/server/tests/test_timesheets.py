"""
Tests for timesheets: the status transition table, employee submit/edit,
and the CEO review path.
"""

from __future__ import annotations

import uuid

import pydantic
import pytest

from bizportal_shared.schemas.common import TIMESHEET_TRANSITIONS, TimesheetStatus
from bizportal_shared.schemas.timesheets import WeekHours, validate_timesheet_transition

from conftest import PASSWORD

S = TimesheetStatus.SUBMITTED
P = TimesheetStatus.IN_PROGRESS
A = TimesheetStatus.APPROVED


# ---------------------------------------------------------------------------
# Unit tests for the transition table
# ---------------------------------------------------------------------------


class TestTransitions:
    def test_allowed(self):
        for current, target in ((S, S), (S, P), (S, A), (P, S), (P, A)):
            valid, msg = validate_timesheet_transition(current, target)
            assert valid, f"{current} -> {target} should be valid: {msg}"

    def test_approved_is_terminal(self):
        assert TIMESHEET_TRANSITIONS[A] == frozenset()
        for target in TimesheetStatus:
            valid, msg = validate_timesheet_transition(A, target)
            assert not valid
            assert msg == "Cannot update approved timesheet"

    def test_in_progress_to_itself(self):
        valid, msg = validate_timesheet_transition(P, P)
        assert not valid
        assert "already" in msg


class TestWeekHours:
    def test_defaults_and_total(self):
        hours = WeekHours(monday=8, friday=4)
        assert hours.sunday == 0
        assert hours.total == 12

    def test_bounds(self):
        for bad in ({"monday": 25}, {"tuesday": -1}):
            with pytest.raises(pydantic.ValidationError):
                WeekHours(**bad)
        assert WeekHours(monday=24, sunday=0).monday == 24

    def test_unknown_day_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            WeekHours.model_validate({"funday": 3})


# ---------------------------------------------------------------------------
# Integration tests: employee surface
# ---------------------------------------------------------------------------


async def _submit(client, headers, project_id, week="2024-01-01", **hours):
    resp = await client.post(
        "/api/employee/timesheet",
        json={"projectId": project_id, "week": week, "hours": hours or {"monday": 8}},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_and_list(self, client, alice, alice_headers, project):
        created = await _submit(client, alice_headers, project["id"], monday=8)
        assert created["status"] == "submitted"
        assert created["employee"]["id"] == alice["id"]
        assert created["project"] == {"id": project["id"], "name": project["name"]}
        assert created["manager"] is None

        resp = await client.get("/api/employee/timesheets", headers=alice_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["status"] == "submitted"
        assert data[0]["week"] == "2024-01-01"
        assert data[0]["hours"]["monday"] == 8
        assert data[0]["hours"]["tuesday"] == 0

    @pytest.mark.asyncio
    async def test_with_manager(self, client, alice_headers, project, make_employee):
        boss = await make_employee("Mallory", "mallory@company.com")
        resp = await client.post(
            "/api/employee/timesheet",
            json={
                "projectId": project["id"],
                "week": "2024-01-08",
                "hours": {"monday": 4},
                "managerId": boss["id"],
            },
            headers=alice_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["manager"]["name"] == "Mallory"

    @pytest.mark.asyncio
    async def test_unknown_project_or_manager(self, client, alice_headers, project):
        resp = await client.post(
            "/api/employee/timesheet",
            json={"projectId": str(uuid.uuid4()), "week": "2024-01-01", "hours": {}},
            headers=alice_headers,
        )
        assert resp.status_code == 404
        resp = await client.post(
            "/api/employee/timesheet",
            json={
                "projectId": project["id"],
                "week": "2024-01-01",
                "hours": {},
                "managerId": str(uuid.uuid4()),
            },
            headers=alice_headers,
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_deleted_employee_token_cannot_submit(
        self, client, ceo_headers, alice, alice_headers, project
    ):
        resp = await client.delete(f"/api/ceo/employees/{alice['id']}", headers=ceo_headers)
        assert resp.status_code == 200

        resp = await client.post(
            "/api/employee/timesheet",
            json={"projectId": project["id"], "week": "2024-01-01", "hours": {"monday": 8}},
            headers=alice_headers,
        )
        assert resp.status_code == 404
        assert resp.json() == {"message": "Employee not found"}
        resp = await client.get("/api/ceo/timesheets", headers=ceo_headers)
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_invalid_hours(self, client, alice_headers, project):
        for hours in ({"monday": 25}, {"monday": -2}, {"someday": 1}):
            resp = await client.post(
                "/api/employee/timesheet",
                json={"projectId": project["id"], "week": "2024-01-01", "hours": hours},
                headers=alice_headers,
            )
            assert resp.status_code == 400, hours
            assert "message" in resp.json()

    @pytest.mark.asyncio
    async def test_missing_week(self, client, alice_headers, project):
        resp = await client.post(
            "/api/employee/timesheet",
            json={"projectId": project["id"], "hours": {"monday": 1}},
            headers=alice_headers,
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicates_allowed(self, client, alice_headers, project):
        first = await _submit(client, alice_headers, project["id"])
        second = await _submit(client, alice_headers, project["id"])
        assert first["id"] != second["id"]
        resp = await client.get("/api/employee/timesheets", headers=alice_headers)
        assert len(resp.json()) == 2

    @pytest.mark.asyncio
    async def test_newest_week_first(self, client, alice_headers, project):
        await _submit(client, alice_headers, project["id"], week="2024-01-08")
        await _submit(client, alice_headers, project["id"], week="2024-01-22")
        await _submit(client, alice_headers, project["id"], week="2024-01-01")
        resp = await client.get("/api/employee/timesheets", headers=alice_headers)
        assert [t["week"] for t in resp.json()] == ["2024-01-22", "2024-01-08", "2024-01-01"]

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_caller(
        self, client, alice_headers, project, make_employee, login
    ):
        await _submit(client, alice_headers, project["id"])
        await make_employee("Bob", "bob@company.com")
        bob_headers = await login("bob@company.com", PASSWORD)
        resp = await client.get("/api/employee/timesheets", headers=bob_headers)
        assert resp.json() == []


class TestEmployeeUpdate:
    @pytest.mark.asyncio
    async def test_update_replaces_hours(self, client, alice_headers, project):
        ts = await _submit(client, alice_headers, project["id"], monday=8)
        resp = await client.put(
            f"/api/employee/timesheet/{ts['id']}",
            json={"hours": {"tuesday": 6}},
            headers=alice_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["hours"]["monday"] == 0
        assert data["hours"]["tuesday"] == 6
        assert data["status"] == "submitted"

    @pytest.mark.asyncio
    async def test_update_resets_in_progress(
        self, client, ceo_headers, alice_headers, project
    ):
        ts = await _submit(client, alice_headers, project["id"])
        resp = await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "inProgress"},
            headers=ceo_headers,
        )
        assert resp.json()["status"] == "inProgress"

        resp = await client.put(
            f"/api/employee/timesheet/{ts['id']}",
            json={"hours": {"monday": 7}},
            headers=alice_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "submitted"

    @pytest.mark.asyncio
    async def test_approved_cannot_be_edited(
        self, client, ceo_headers, alice_headers, project
    ):
        ts = await _submit(client, alice_headers, project["id"])
        await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "approved"},
            headers=ceo_headers,
        )
        resp = await client.put(
            f"/api/employee/timesheet/{ts['id']}",
            json={"hours": {"monday": 1}},
            headers=alice_headers,
        )
        assert resp.status_code == 409
        assert resp.json() == {"message": "Cannot update approved timesheet"}

        resp = await client.get("/api/employee/timesheets", headers=alice_headers)
        assert resp.json()[0]["hours"]["monday"] == 8

    @pytest.mark.asyncio
    async def test_other_employee_gets_not_found(
        self, client, ceo_headers, alice_headers, project, make_employee, login
    ):
        ts = await _submit(client, alice_headers, project["id"])
        # Approved first so ownership is checked before state.
        await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "approved"},
            headers=ceo_headers,
        )
        await make_employee("Bob", "bob@company.com")
        bob_headers = await login("bob@company.com", PASSWORD)
        resp = await client.put(
            f"/api/employee/timesheet/{ts['id']}",
            json={"hours": {"monday": 1}},
            headers=bob_headers,
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_timesheet(self, client, alice_headers):
        resp = await client.put(
            f"/api/employee/timesheet/{uuid.uuid4()}",
            json={"hours": {"monday": 1}},
            headers=alice_headers,
        )
        assert resp.status_code == 404
        assert resp.json() == {"message": "Timesheet not found"}


# ---------------------------------------------------------------------------
# Integration tests: CEO review
# ---------------------------------------------------------------------------


class TestReview:
    @pytest.mark.asyncio
    async def test_ceo_lists_all(self, client, ceo_headers, alice_headers, project):
        await _submit(client, alice_headers, project["id"], week="2024-01-01")
        await _submit(client, alice_headers, project["id"], week="2024-01-08")
        resp = await client.get("/api/ceo/timesheets", headers=ceo_headers)
        assert resp.status_code == 200
        assert [t["week"] for t in resp.json()] == ["2024-01-08", "2024-01-01"]

    @pytest.mark.asyncio
    async def test_review_sets_manager(self, client, ceo_headers, alice_headers, project):
        ts = await _submit(client, alice_headers, project["id"])
        resp = await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "approved"},
            headers=ceo_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "approved"
        assert data["manager"]["email"] == "ceo@company.com"

    @pytest.mark.asyncio
    async def test_illegal_transitions(self, client, ceo_headers, alice_headers, project):
        ts = await _submit(client, alice_headers, project["id"])
        url = f"/api/ceo/timesheets/{ts['id']}/status"

        resp = await client.put(url, json={"status": "inProgress"}, headers=ceo_headers)
        assert resp.status_code == 200
        resp = await client.put(url, json={"status": "inProgress"}, headers=ceo_headers)
        assert resp.status_code == 409

        resp = await client.put(url, json={"status": "approved"}, headers=ceo_headers)
        assert resp.status_code == 200
        for status in ("submitted", "inProgress", "approved"):
            resp = await client.put(url, json={"status": status}, headers=ceo_headers)
            assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_unknown_status_value(self, client, ceo_headers, alice_headers, project):
        ts = await _submit(client, alice_headers, project["id"])
        resp = await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "rejected"},
            headers=ceo_headers,
        )
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_review_requires_ceo(self, client, alice_headers, project):
        ts = await _submit(client, alice_headers, project["id"])
        resp = await client.put(
            f"/api/ceo/timesheets/{ts['id']}/status",
            json={"status": "approved"},
            headers=alice_headers,
        )
        assert resp.status_code == 401


# ---------------------------------------------------------------------------
# End-to-end walkthrough
# ---------------------------------------------------------------------------


class TestWalkthrough:
    @pytest.mark.asyncio
    async def test_portal_walkthrough(
        self, client, ceo_headers, make_client, make_employee, make_project, login
    ):
        c1 = await make_client("Contoso", "contoso@clients.com")
        e1 = await make_employee("Erin", "erin@company.com")
        p1 = await make_project(c1["id"], employees=[e1["id"]])
        assert p1["status"] == "ongoing"

        e1_headers = await login("erin@company.com", PASSWORD)
        await _submit(client, e1_headers, p1["id"], week="2024-01-01", monday=8)
        sheets = (await client.get("/api/employee/timesheets", headers=e1_headers)).json()
        assert len(sheets) == 1
        assert sheets[0]["status"] == "submitted"
        assert sheets[0]["hours"]["monday"] == 8

        await client.delete(f"/api/ceo/projects/{p1['id']}", headers=ceo_headers)
        resp = await client.get("/api/employee/projects", headers=e1_headers)
        assert p1["id"] not in [p["id"] for p in resp.json()]

        await client.put(
            f"/api/ceo/employees/{e1['id']}", json={"access": "inactive"}, headers=ceo_headers
        )
        resp = await client.post(
            "/api/auth/login", json={"email": "erin@company.com", "password": PASSWORD}
        )
        assert resp.status_code == 401
