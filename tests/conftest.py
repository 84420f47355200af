"""Shared pytest fixtures."""

from __future__ import annotations

import os

# Settings must not see the developer's JUNIPER_* environment
for _name in list(os.environ):
    if _name.startswith("JUNIPER_"):
        del os.environ[_name]

import pytest
from httpx import ASGITransport, AsyncClient

from junos_connector.config import Settings
from tests.mock_ssh import FakeSSHClient, MockDeviceService, client_factory


@pytest.fixture
def empty_settings(monkeypatch, tmp_path):
    """Settings that see no environment overrides and no .env file."""
    monkeypatch.chdir(tmp_path)
    return Settings()


@pytest.fixture
def fake_client():
    """Provide a fresh FakeSSHClient."""
    return FakeSSHClient()


@pytest.fixture
def connection(fake_client, empty_settings):
    """Live-mode connection wired to the fake client."""
    from junos_connector.services.connection import JunosConnection

    conn = JunosConnection(
        {"host": "mx1.lab", "user": "admin", "password": "s3cret"},
        settings=empty_settings,
        client_factory=client_factory(fake_client),
    )
    yield conn
    conn.close()


@pytest.fixture
def simulated(empty_settings):
    from junos_connector.services.connection import JunosConnection

    return JunosConnection(
        {"host": "dev1", "user": "admin", "simulated": True},
        settings=empty_settings,
    )


@pytest.fixture
async def client(simulated, monkeypatch):
    """Async test client with a simulated device injected."""
    import junos_connector.auth as auth_mod
    import junos_connector.services.device as device_mod

    monkeypatch.setattr(auth_mod.settings, "api_key", "")
    mock_service = MockDeviceService(simulated)
    monkeypatch.setattr(device_mod, "device_service", mock_service)

    from junos_connector.main import app as fastapi_app

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
