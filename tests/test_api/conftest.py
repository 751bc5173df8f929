"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from lightduel.api.main import create_app
from lightduel.simulation.session_manager import GameSessionManager, get_session_manager


@pytest.fixture
def manager() -> GameSessionManager:
    """Isolated session manager with a slow frame loop."""
    return GameSessionManager(frame_interval_ms=1000)


@pytest.fixture
def app(manager):
    app = create_app()
    app.dependency_overrides[get_session_manager] = lambda: manager
    return app


@pytest.fixture
def client(app):
    """Test client sharing one event loop for the whole test."""
    with TestClient(app) as client:
        yield client
        # Cancel any frame loops left running
        for session_id in client.get("/api/v1/sessions").json():
            client.delete(f"/api/v1/sessions/{session_id}")


@pytest.fixture
def session_id(client) -> str:
    """An idle session on the default 40x40 arena at speed 5."""
    response = client.post("/api/v1/sessions", json={"seed": 1})
    assert response.status_code == 201
    return response.json()["session_id"]
