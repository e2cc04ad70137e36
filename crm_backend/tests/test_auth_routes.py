"""
Tests for /api/users: registration, login, token gate, profile and
admin user management.
"""

from datetime import datetime, timezone, timedelta

import jwt

from crm_backend.config import JWT_SECRET, JWT_ALGORITHM
from crm_backend.tests.conftest import run, auth_headers, TEST_PASSWORD


class TestRegister:

    def test_register_returns_token_and_summary(self, client):
        r = client.post("/api/users/register", json={
            "name": "Jane Doe", "email": "Jane@Example.com", "password": "secret1"
        })
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["token"]
        assert data["user"]["name"] == "Jane Doe"
        assert data["user"]["email"] == "jane@example.com"
        assert data["user"]["role"] == "agent"
        assert "password" not in data["user"]

    def test_register_cannot_grant_admin(self, client):
        r = client.post("/api/users/register", json={
            "name": "Eve", "email": "eve@example.com", "password": "secret1", "role": "admin"
        })
        assert r.status_code == 200
        assert r.json()["user"]["role"] == "agent"

    def test_register_keeps_manager_role(self, client):
        r = client.post("/api/users/register", json={
            "firstName": "Mo", "lastName": "Lee", "email": "mo@example.com",
            "password": "secret1", "role": "manager"
        })
        assert r.json()["user"]["role"] == "manager"
        assert r.json()["user"]["name"] == "Mo Lee"

    def test_register_fills_missing_last_name(self, client, test_db):
        r = client.post("/api/users/register", json={
            "firstName": "Solo", "email": "solo@example.com", "password": "secret1"
        })
        stored = run(test_db.users.find_one({"id": r.json()["user"]["id"]}))
        assert stored["firstName"] == "Solo"
        assert stored["lastName"] == "User"
        assert stored["password"] != "secret1"

    def test_register_duplicate_email(self, client, agent):
        r = client.post("/api/users/register", json={
            "name": "Dup", "email": agent["email"].upper(), "password": "secret1"
        })
        assert r.status_code == 400
        assert r.json()["message"] == "User already exists"

    def test_register_validation_order(self, client):
        r = client.post("/api/users/register", json={"password": "x"})
        assert r.json()["message"] == "Validation error: email is required"

        r = client.post("/api/users/register", json={"email": "not-an-email", "password": "x"})
        assert r.json()["message"] == "Validation error: password must be at least 6 characters"

        r = client.post("/api/users/register", json={"email": "not-an-email", "password": "secret1"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error: please provide a valid email address"


class TestLogin:

    def test_login_success_case_insensitive_email(self, client, agent):
        r = client.post("/api/users/login", json={"email": "AGENT1@test.local", "password": TEST_PASSWORD})
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["user"] == {
            "id": agent["id"], "name": "Alex Agent", "email": agent["email"], "role": "agent"
        }

    def test_login_wrong_password(self, client, agent):
        r = client.post("/api/users/login", json={"email": agent["email"], "password": "wrong-pass"})
        assert r.status_code == 400
        assert r.json() == {"message": "Invalid credentials"}

    def test_password_is_case_sensitive(self, client, agent):
        r = client.post("/api/users/login", json={"email": agent["email"], "password": TEST_PASSWORD.lower()})
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid credentials"

    def test_login_unknown_email_same_message(self, client):
        r = client.post("/api/users/login", json={"email": "ghost@test.local", "password": "whatever"})
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid credentials"

    def test_login_missing_field_is_validation_error(self, client):
        r = client.post("/api/users/login", json={"email": "a@b.co"})
        assert r.status_code == 400
        assert r.json()["message"] == "Validation error"
        assert any("password" in e for e in r.json()["errors"])

    def test_login_is_recorded_in_audit_trail(self, client, test_db, agent):
        client.post("/api/users/login", json={"email": agent["email"], "password": TEST_PASSWORD})
        entry = run(test_db.auditlogs.find_one({"userID": agent["id"], "action": "login"}))
        assert entry is not None
        assert entry["entityType"] == "user"

    def test_login_token_opens_protected_routes(self, client, agent):
        token = client.post(
            "/api/users/login", json={"email": agent["email"], "password": TEST_PASSWORD}
        ).json()["token"]
        r = client.get("/api/users/profile", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200
        assert r.json()["id"] == agent["id"]


class TestTokenGate:

    def test_missing_token(self, client):
        r = client.get("/api/customers")
        assert r.status_code == 401
        assert r.json()["message"] == "No token, authorization denied"

    def test_invalid_token(self, client):
        r = client.get("/api/customers", headers={"Authorization": "Bearer not.a.jwt"})
        assert r.status_code == 401
        assert r.json()["message"] == "Token is not valid"

    def test_expired_token(self, client, agent):
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"userId": agent["id"], "role": "agent", "iat": past, "exp": past + timedelta(hours=1)},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM
        )
        r = client.get("/api/customers", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
        assert r.json()["message"] == "Token is not valid"

    def test_bare_token_accepted(self, client, agent):
        headers = auth_headers(agent)
        bare = headers["Authorization"][len("Bearer "):]
        r = client.get("/api/customers", headers={"Authorization": bare})
        assert r.status_code == 200

    def test_token_for_deleted_user(self, client, test_db, agent, agent_headers):
        run(test_db.users.delete_one({"id": agent["id"]}))
        r = client.get("/api/users/profile", headers=agent_headers)
        assert r.status_code == 401
        assert r.json()["message"] == "User not found"


class TestProfile:

    def test_get_profile_hides_password(self, client, agent_headers):
        r = client.get("/api/users/profile", headers=agent_headers)
        assert r.status_code == 200
        assert "password" not in r.json()
        assert r.json()["firstName"] == "Alex"

    def test_update_profile(self, client, agent_headers):
        r = client.put("/api/users/profile", headers=agent_headers, json={
            "firstName": "Alexis", "phoneNumber": "555-0100"
        })
        assert r.status_code == 200
        assert r.json()["firstName"] == "Alexis"
        assert r.json()["lastName"] == "Agent"
        assert r.json()["phoneNumber"] == "555-0100"

    def test_update_profile_duplicate_email(self, client, agent_headers, other_agent):
        r = client.put("/api/users/profile", headers=agent_headers, json={"email": other_agent["email"]})
        assert r.status_code == 400
        assert r.json()["message"] == "Email already exists"

    def test_change_password(self, client, agent, agent_headers):
        r = client.put("/api/users/change-password", headers=agent_headers, json={
            "oldPassword": TEST_PASSWORD, "newPassword": "NewSecret9"
        })
        assert r.status_code == 200
        assert r.json()["message"] == "Password changed successfully"

        r = client.post("/api/users/login", json={"email": agent["email"], "password": "NewSecret9"})
        assert r.status_code == 200

    def test_change_password_wrong_current(self, client, agent_headers):
        r = client.put("/api/users/change-password", headers=agent_headers, json={
            "oldPassword": "nope-nope", "newPassword": "NewSecret9"
        })
        assert r.status_code == 400
        assert r.json()["message"] == "Current password is incorrect"


class TestUserManagement:

    def test_list_users_requires_admin(self, client, agent_headers, manager_headers):
        for headers in (agent_headers, manager_headers):
            r = client.get("/api/users", headers=headers)
            assert r.status_code == 403
            assert r.json()["message"] == "Access denied. Admin privileges required."

    def test_admin_lists_users_without_passwords(self, client, admin_headers, agent):
        r = client.get("/api/users", headers=admin_headers)
        assert r.status_code == 200
        emails = [u["email"] for u in r.json()]
        assert agent["email"] in emails
        assert all("password" not in u for u in r.json())

    def test_admin_creates_user_with_role(self, client, admin_headers):
        r = client.post("/api/users", headers=admin_headers, json={
            "name": "New Boss", "email": "boss@test.local", "password": "secret1", "role": "admin"
        })
        assert r.status_code == 201, r.text
        assert r.json()["role"] == "admin"

    def test_admin_create_unknown_role_becomes_agent(self, client, admin_headers):
        r = client.post("/api/users", headers=admin_headers, json={
            "name": "Someone", "email": "someone@test.local", "password": "secret1", "role": "wizard"
        })
        assert r.json()["role"] == "agent"

    def test_admin_create_duplicate(self, client, admin_headers, agent):
        r = client.post("/api/users", headers=admin_headers, json={
            "name": "Dup", "email": agent["email"], "password": "secret1"
        })
        assert r.status_code == 400
        assert r.json()["message"] == "User with this email already exists"

    def test_any_user_can_read_one_user(self, client, agent_headers, other_agent):
        r = client.get(f"/api/users/{other_agent['id']}", headers=agent_headers)
        assert r.status_code == 200
        assert r.json()["email"] == other_agent["email"]

    def test_admin_updates_role(self, client, admin_headers, agent):
        r = client.put(f"/api/users/{agent['id']}", headers=admin_headers, json={"role": "manager"})
        assert r.status_code == 200
        assert r.json()["role"] == "manager"

    def test_admin_cannot_delete_self(self, client, admin, admin_headers):
        r = client.delete(f"/api/users/{admin['id']}", headers=admin_headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Cannot delete your own account"

    def test_delete_user_twice(self, client, admin_headers, agent):
        r = client.delete(f"/api/users/{agent['id']}", headers=admin_headers)
        assert r.status_code == 200
        r = client.delete(f"/api/users/{agent['id']}", headers=admin_headers)
        assert r.status_code == 404
        assert r.json()["message"] == "User not found"
