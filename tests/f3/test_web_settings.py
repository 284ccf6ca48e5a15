"""Tests for profile, password and notification settings (F3)."""

import pytest
import structlog
from fastapi.testclient import TestClient

from cyberguard.web.api import create_app

PASSWORD = "password123"

PROFILE = {
    "username": "alice",
    "email": "alice@example.com",
    "role": "Security Lead",
    "company": "Acme Ltd",
    "phone": "+44 20 7946 0000",
    "bio": "Keeps the phishing simulator busy.",
}


class TestProfile:
    """Tests for PUT /api/settings/profile."""

    def test_update_profile(self, auth_client):
        response = auth_client.put("/api/settings/profile", json=PROFILE)
        assert response.status_code == 200
        data = response.json()
        assert data["company"] == "Acme Ltd"
        assert data["role"] == "Security Lead"
        assert data["bio"] == PROFILE["bio"]
        assert auth_client.get("/api/user").json()["phone"] == PROFILE["phone"]

    def test_rename(self, auth_client):
        response = auth_client.put("/api/settings/profile", json={**PROFILE, "username": "alice2"})
        assert response.status_code == 200
        assert auth_client.get("/api/user").json()["username"] == "alice2"

    def test_rename_to_taken_username(self, auth_client, storage):
        storage.create_user(username="bob", password="x")
        response = auth_client.put("/api/settings/profile", json={**PROFILE, "username": "bob"})
        assert response.status_code == 400
        assert response.json() == {"detail": "Username already exists"}

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("username", "a", "Username must be at least 2 characters."),
            ("email", "nope", "Invalid email address."),
            ("role", "", "Please select a role."),
            ("company", " ", "Please enter your company name."),
        ],
    )
    def test_field_messages(self, auth_client, field, value, message):
        response = auth_client.put("/api/settings/profile", json={**PROFILE, field: value})
        assert response.status_code == 422
        assert response.json()["errors"] == {field: message}

    def test_records_activity(self, auth_client):
        auth_client.put("/api/settings/profile", json=PROFILE)
        latest = auth_client.get("/api/user/activity").json()[0]
        assert latest["action"] == "profile_update"


class TestPassword:
    """Tests for PUT /api/settings/password."""

    def _change(self, client, current, new, confirm=None):
        return client.put(
            "/api/settings/password",
            json={
                "currentPassword": current,
                "newPassword": new,
                "confirmPassword": new if confirm is None else confirm,
            },
        )

    def test_change_password(self, auth_client):
        response = self._change(auth_client, PASSWORD, "n3w-password")
        assert response.status_code == 200

        auth_client.post("/api/logout")
        old = auth_client.post("/api/login", json={"username": "alice", "password": PASSWORD})
        new = auth_client.post("/api/login", json={"username": "alice", "password": "n3w-password"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_wrong_current_password(self, auth_client):
        response = self._change(auth_client, "not-my-password", "n3w-password")
        assert response.status_code == 400
        assert response.json() == {"detail": "Current password is incorrect"}

    def test_too_short(self, auth_client):
        response = self._change(auth_client, PASSWORD, "short")
        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors["newPassword"] == "Password must be at least 8 characters."

    def test_confirmation_mismatch(self, auth_client):
        response = self._change(auth_client, PASSWORD, "n3w-password", confirm="other-password")
        assert response.status_code == 422
        assert response.json()["errors"] == {"confirmPassword": "Passwords do not match"}

    def test_short_current_password_accepted(self, client, register):
        register(client, username="bob", password="abc")
        response = self._change(client, "abc", "n3w-password")
        assert response.status_code == 200

        client.post("/api/logout")
        login = client.post("/api/login", json={"username": "bob", "password": "n3w-password"})
        assert login.status_code == 200

    def test_current_password_required(self, auth_client):
        response = self._change(auth_client, "", "n3w-password")
        assert response.status_code == 422
        assert response.json()["errors"] == {"currentPassword": "Current password is required."}


class TestNotifications:
    """Tests for GET/PUT /api/settings/notifications."""

    def test_defaults(self, auth_client):
        assert auth_client.get("/api/settings/notifications").json() == {
            "securityAlerts": True,
            "newModules": True,
            "assessmentReminders": True,
            "teamUpdates": False,
            "marketingEmails": False,
            "emailDigest": "daily",
        }

    def test_update_persists(self, auth_client):
        payload = {
            "securityAlerts": True,
            "newModules": False,
            "assessmentReminders": True,
            "teamUpdates": True,
            "marketingEmails": False,
            "emailDigest": "weekly",
        }
        response = auth_client.put("/api/settings/notifications", json=payload)
        assert response.status_code == 200
        assert response.json() == payload
        assert auth_client.get("/api/settings/notifications").json() == payload

    def test_invalid_digest(self, auth_client):
        response = auth_client.put("/api/settings/notifications", json={"emailDigest": "hourly"})
        assert response.status_code == 422
        assert "emailDigest" in response.json()["errors"]


class TestLifespan:
    def test_startup_seeds_storage(self, app_config, storage):
        app_config.storage.seed_on_startup = True
        with TestClient(create_app(config=app_config, storage=storage)) as client:
            assert client.get("/health").status_code == 200
        assert len(storage.get_modules()) == 5
        assert len(storage.get_security_events()) == 2

    def test_startup_configures_logging(self, app_config, storage):
        app_config.logging.json_output = True
        with TestClient(create_app(config=app_config, storage=storage)):
            processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
