"""
Tests for per-user resources: notifications and settings.
"""

import pytest

from crm_backend.tests.conftest import run


@pytest.fixture
def notification(client, agent_headers):
    r = client.post("/api/notifications", headers=agent_headers, json={
        "title": "Welcome", "message": "Your account is ready", "type": "success"
    })
    assert r.status_code == 201, r.text
    return r.json()


class TestNotifications:

    def test_create_defaults(self, notification, agent):
        assert notification["userID"] == agent["id"]
        assert notification["isRead"] is False
        assert notification["type"] == "success"

    def test_validation(self, client, agent_headers):
        r = client.post("/api/notifications", headers=agent_headers, json={"message": "no title"})
        assert r.json()["message"] == "Validation error: title is required"
        r = client.post("/api/notifications", headers=agent_headers, json={"title": "no message"})
        assert r.json()["message"] == "Validation error: message is required"

    def test_list_only_own(self, client, notification, agent_headers, other_agent_headers):
        assert [n["id"] for n in client.get("/api/notifications", headers=agent_headers).json()] == [
            notification["id"]
        ]
        assert client.get("/api/notifications", headers=other_agent_headers).json() == []

    def test_mark_read_and_count(self, client, notification, agent_headers):
        assert client.get("/api/notifications/unread-count", headers=agent_headers).json() == {"count": 1}

        r = client.put(f"/api/notifications/{notification['id']}/read", headers=agent_headers)
        assert r.status_code == 200
        assert r.json()["isRead"] is True

        assert client.get("/api/notifications/unread-count", headers=agent_headers).json() == {"count": 0}

    def test_cannot_touch_someone_elses(self, client, notification, other_agent_headers):
        r = client.put(f"/api/notifications/{notification['id']}/read", headers=other_agent_headers)
        assert r.status_code == 404
        r = client.delete(f"/api/notifications/{notification['id']}", headers=other_agent_headers)
        assert r.status_code == 404

    def test_mark_all_read(self, client, notification, agent_headers):
        client.post("/api/notifications", headers=agent_headers, json={"title": "Two", "message": "Second"})
        r = client.put("/api/notifications/mark-all-read", headers=agent_headers)
        assert r.json()["updated"] == 2
        r = client.get("/api/notifications", headers=agent_headers, params={"unreadOnly": True})
        assert r.json() == []

    def test_delete_and_clear(self, client, notification, agent_headers):
        r = client.delete(f"/api/notifications/{notification['id']}", headers=agent_headers)
        assert r.json() == {"message": "Notification deleted"}
        assert client.delete(f"/api/notifications/{notification['id']}", headers=agent_headers).status_code == 404

        client.post("/api/notifications", headers=agent_headers, json={"title": "A", "message": "a"})
        client.post("/api/notifications", headers=agent_headers, json={"title": "B", "message": "b"})
        r = client.delete("/api/notifications", headers=agent_headers)
        assert r.json()["deleted"] == 2
        assert client.get("/api/notifications", headers=agent_headers).json() == []


class TestSettings:

    def test_defaults_created_on_first_read(self, client, agent, agent_headers):
        r = client.get("/api/settings", headers=agent_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["userID"] == agent["id"]
        assert data["display"]["theme"] == "light"
        assert data["notifications"]["emailNotifications"] is True

    def test_repeated_reads_keep_one_document(self, client, test_db, agent, agent_headers):
        first = client.get("/api/settings", headers=agent_headers).json()
        second = client.get("/api/settings", headers=agent_headers).json()
        assert first["id"] == second["id"]
        assert run(test_db.settings.count_documents({"userID": agent["id"]})) == 1

    def test_update_merges_section(self, client, agent_headers):
        r = client.put("/api/settings", headers=agent_headers, json={
            "display": {"theme": "dark"}, "privacy": {"showPhone": True}
        })
        assert r.status_code == 200
        data = r.json()
        assert data["display"]["theme"] == "dark"
        assert data["display"]["language"] == "en"
        assert data["privacy"]["showPhone"] is True
        assert data["privacy"]["showEmail"] is True

    def test_invalid_theme(self, client, agent_headers):
        r = client.put("/api/settings", headers=agent_headers, json={"display": {"theme": "neon"}})
        assert r.status_code == 400

    def test_settings_are_per_user(self, client, agent_headers, other_agent_headers):
        client.put("/api/settings", headers=agent_headers, json={"display": {"theme": "dark"}})
        r = client.get("/api/settings", headers=other_agent_headers)
        assert r.json()["display"]["theme"] == "light"

    def test_reset(self, client, agent_headers):
        client.put("/api/settings", headers=agent_headers, json={"display": {"currency": "EUR"}})
        r = client.post("/api/settings/reset", headers=agent_headers)
        assert r.status_code == 200
        assert r.json()["display"]["currency"] == "USD"
