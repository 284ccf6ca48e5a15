"""Fixtures for Web API tests (F3)."""

import pytest
from fastapi.testclient import TestClient

from cyberguard.config.app_config import AppConfig, AuthConfig, StorageConfig
from cyberguard.db import MemStorage
from cyberguard.web.api import create_app

PASSWORD = "password123"


def _register(client, username="alice", password=PASSWORD, **extra):
    payload = {
        "username": username,
        "password": password,
        "confirmPassword": password,
        "acceptTerms": True,
        **extra,
    }
    return client.post("/api/register", json=payload)


@pytest.fixture
def app_config(monkeypatch):
    monkeypatch.setenv("CYBERGUARD_SESSION_SECRET", "test-secret")
    return AppConfig(
        auth=AuthConfig(bcrypt_rounds=4),
        storage=StorageConfig(backend="memory", seed_on_startup=False),
    )


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def app(app_config, storage):
    return create_app(config=app_config, storage=storage)


@pytest.fixture
def client(app):
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def register():
    """Submit the registration form: register(client, username=..., password=..., **extra)."""
    return _register


@pytest.fixture
def auth_client(client):
    """Client logged in as a freshly registered user "alice"."""
    response = _register(client)
    assert response.status_code == 201
    return client
