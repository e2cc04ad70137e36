"""
Tests for /api/targets: ordered validation and status transitions.
"""

import pytest

from crm_backend.models import TargetCreate, validate_target_create, validate_target_transition
from crm_backend.tests.conftest import run

VALID = {
    "targetAmount": 5000,
    "period": "monthly",
    "startDate": "2026-03-01T00:00:00Z",
    "endDate": "2026-03-31T23:59:59Z",
}


@pytest.fixture
def target(client, agent_headers):
    r = client.post("/api/targets", headers=agent_headers, json=VALID)
    assert r.status_code == 201, r.text
    return r.json()


class TestTargetValidation:

    @pytest.mark.parametrize("payload, message", [
        ({}, "Validation error: targetAmount must be a positive number"),
        ({"targetAmount": -5}, "Validation error: targetAmount must be a positive number"),
        ({"targetAmount": 10}, "Validation error: period is required (monthly, quarterly, or yearly)"),
        ({"targetAmount": 10, "period": "yearly"}, "Validation error: startDate is required"),
        ({"targetAmount": 10, "period": "yearly", "startDate": "2026-01-01T00:00:00"}, "Validation error: endDate is required"),
        (
            {"targetAmount": 10, "period": "yearly", "startDate": "2026-02-01T00:00:00", "endDate": "2026-01-01T00:00:00"},
            "Validation error: endDate must be after startDate",
        ),
        (
            {"targetAmount": 10, "period": "yearly", "startDate": "2026-02-01T00:00:00", "endDate": "2026-02-01T00:00:00"},
            "Validation error: endDate must be after startDate",
        ),
        ({"targetAmount": 10, "period": "weekly"}, "Validation error: period is required (monthly, quarterly, or yearly)"),
        ({**VALID, "status": "paused"}, "Validation error: status must be in_progress, completed, or failed"),
    ])
    def test_first_failing_rule_wins(self, payload, message):
        assert validate_target_create(TargetCreate(**payload)) == message

    def test_valid_target_passes(self):
        assert validate_target_create(TargetCreate(**VALID)) is None

    def test_route_reports_first_failure(self, client, agent_headers):
        r = client.post("/api/targets", headers=agent_headers, json={"targetAmount": 0, "period": "weekly"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: targetAmount must be a positive number"

        r = client.post("/api/targets", headers=agent_headers, json={"targetAmount": 100, "period": "weekly"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: period is required (monthly, quarterly, or yearly)"

        r = client.post("/api/targets", headers=agent_headers, json={"targetAmount": 100, "period": "monthly"})
        assert r.json()["message"] == "Validation error: startDate is required"

    @pytest.mark.parametrize("current, new, allowed", [
        ("in_progress", "completed", True),
        ("in_progress", "failed", True),
        ("in_progress", "in_progress", True),
        ("completed", "in_progress", False),
        ("failed", "completed", False),
    ])
    def test_transitions(self, current, new, allowed):
        assert (validate_target_transition(current, new) is None) == allowed


class TestTargetRoutes:

    def test_create_defaults(self, target, agent):
        assert target["userID"] == agent["id"]
        assert target["status"] == "in_progress"
        assert target["achieved"] == 0
        assert target["startDate"] == "2026-03-01T00:00:00+00:00"

    def test_create_for_another_user(self, client, manager_headers, agent):
        r = client.post("/api/targets", headers=manager_headers, json={**VALID, "userID": agent["id"]})
        assert r.json()["userID"] == agent["id"]

    def test_list_filter_by_user(self, client, target, agent, manager_headers, other_agent):
        r = client.get("/api/targets", headers=manager_headers, params={"userID": agent["id"]})
        assert [t["id"] for t in r.json()] == [target["id"]]
        r = client.get("/api/targets", headers=manager_headers, params={"userID": other_agent["id"]})
        assert r.json() == []

    def test_complete_then_locked(self, client, target, agent_headers):
        r = client.put(f"/api/targets/{target['id']}", headers=agent_headers, json={
            "status": "completed", "achieved": 5200
        })
        assert r.status_code == 200
        assert r.json()["status"] == "completed"
        assert r.json()["achieved"] == 5200

        r = client.put(f"/api/targets/{target['id']}", headers=agent_headers, json={"status": "in_progress"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: target status cannot change from completed to in_progress"

    def test_achieved_does_not_change_status(self, client, target, agent_headers):
        r = client.put(f"/api/targets/{target['id']}", headers=agent_headers, json={"achieved": 9999})
        assert r.json()["status"] == "in_progress"

    def test_update_rechecks_date_order(self, client, target, agent_headers):
        r = client.put(f"/api/targets/{target['id']}", headers=agent_headers, json={
            "endDate": "2026-02-01T00:00:00Z"
        })
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: endDate must be after startDate"

    def test_update_with_unreadable_stored_dates(self, client, test_db, agent, agent_headers):
        run(test_db.targets.insert_one({
            "id": "t-bad", "userID": agent["id"], "targetAmount": 10, "period": "monthly",
            "startDate": "garbage", "endDate": "garbage", "status": "in_progress", "achieved": 0,
        }))
        r = client.put("/api/targets/t-bad", headers=agent_headers, json={"endDate": "2026-02-01T00:00:00Z"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: endDate must be after startDate"

    def test_update_rejects_non_positive_amount(self, client, target, agent_headers):
        r = client.put(f"/api/targets/{target['id']}", headers=agent_headers, json={"targetAmount": 0})
        assert r.status_code == 400

    def test_delete_twice(self, client, target, agent_headers):
        assert client.delete(f"/api/targets/{target['id']}", headers=agent_headers).json() == {
            "message": "Target deleted"
        }
        r = client.delete(f"/api/targets/{target['id']}", headers=agent_headers)
        assert r.status_code == 404
        assert r.json()["message"] == "Target not found"
