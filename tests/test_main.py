"""
Tests for the FastAPI backend proxy routes.
"""

import re
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from rtc_agent.errors import (
    InstanceCreationError,
    InstanceTeardownError,
    RegistrationError,
    SendError,
)
from rtc_agent.main import APP_NAME, APP_VERSION, app
from rtc_agent.models.vendor_schemas import AgentInstance
from rtc_agent.services.instance_manager import InstanceLifecycleManager


@pytest.fixture(autouse=True)
def reset_instance_manager():
    """Start every test without an injected instance manager"""
    app.state.instance_manager = None
    yield
    app.state.instance_manager = None


@pytest.fixture
def manager():
    manager = MagicMock()
    manager.registry.is_registered = False
    manager.create_instance = AsyncMock(
        return_value=AgentInstance(
            instance_id="inst_1",
            agent_id="agent_1",
            room_id="room_1",
            user_id="user_1",
            user_stream_id="user_1_stream",
        )
    )
    manager.send_utterance = AsyncMock(return_value=None)
    manager.destroy_instance = AsyncMock(return_value=None)
    return manager


@pytest.fixture
def client(manager):
    app.state.instance_manager = manager
    return TestClient(app)


def test_health_check(client, manager):
    """Test the health check endpoint returns correct response"""
    response = client.get("/health")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["status"] == "healthy"
    assert response_json["registeredAgent"] is False
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T[\d:.]+Z", response_json["timestamp"])

    manager.registry.is_registered = True
    assert client.get("/health").json()["registeredAgent"] is True


def test_health_check_without_manager():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["registeredAgent"] is False


def test_root_endpoint(client):
    """Test the root endpoint returns the correct API information"""
    response = client.get("/")
    assert response.status_code == 200

    response_json = response.json()
    assert response_json["name"] == APP_NAME
    assert response_json["version"] == APP_VERSION
    for path in ("/api/start", "/api/send-message", "/api/stop", "/api/callbacks", "/health"):
        assert path in response_json["endpoints"]


def test_start_session(client, manager):
    response = client.post("/api/start", json={"room_id": "room_1", "user_id": "user_1"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "agentInstanceId": "inst_1",
        "agentId": "agent_1",
    }
    manager.create_instance.assert_awaited_once_with("room_1", "user_1", None)


def test_start_session_passes_user_stream_id(client, manager):
    client.post(
        "/api/start",
        json={"room_id": "room_1", "user_id": "user_1", "user_stream_id": "user_1_stream"},
    )

    manager.create_instance.assert_awaited_once_with("room_1", "user_1", "user_1_stream")


@pytest.mark.parametrize(
    "error",
    [
        InstanceCreationError("room is full", code=2001),
        RegistrationError("Failed to register agent: invalid template"),
    ],
)
def test_start_session_vendor_error(client, manager, error):
    manager.create_instance.side_effect = error

    response = client.post("/api/start", json={"room_id": "room_1", "user_id": "user_1"})

    assert response.status_code == 500
    assert response.json() == {"error": error.message}


def test_start_session_unexpected_error(client, manager):
    manager.create_instance.side_effect = RuntimeError("boom")

    response = client.post("/api/start", json={"room_id": "room_1", "user_id": "user_1"})

    assert response.status_code == 500
    assert response.json() == {"error": "boom"}


def test_start_session_without_manager():
    response = TestClient(app).post(
        "/api/start", json={"room_id": "room_1", "user_id": "user_1"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Agent service is not initialized"}


@pytest.mark.parametrize(
    "body", [{"room_id": "", "user_id": "user_1"}, {"user_id": "user_1"}]
)
def test_start_session_invalid_body(client, manager, body):
    response = client.post("/api/start", json=body)

    assert response.status_code == 500
    assert set(response.json()) == {"error"}
    assert response.json()["error"].startswith("Invalid request: ")
    assert "room_id" in response.json()["error"]
    manager.create_instance.assert_not_awaited()


@pytest.mark.parametrize(
    "path,body",
    [
        ("/api/send-message", {"agent_instance_id": "inst_1"}),
        ("/api/stop", {"agent_instance_id": ""}),
    ],
)
def test_invalid_body_returns_error_payload(client, manager, path, body):
    response = client.post(path, json=body)

    assert response.status_code == 500
    assert "error" in response.json()
    assert "detail" not in response.json()
    manager.send_utterance.assert_not_awaited()
    manager.destroy_instance.assert_not_awaited()


def test_non_json_body_returns_error_payload(client, manager):
    response = client.post(
        "/api/start", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json()["error"].startswith("Invalid request: ")
    manager.create_instance.assert_not_awaited()


def test_send_message(client, manager):
    response = client.post(
        "/api/send-message", json={"agent_instance_id": "inst_1", "message": "Hello"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    manager.send_utterance.assert_awaited_once_with("inst_1", "Hello")


def test_send_message_error(client, manager):
    manager.send_utterance.side_effect = SendError("instance not found", code=3001)

    response = client.post(
        "/api/send-message", json={"agent_instance_id": "inst_1", "message": "Hello"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "instance not found"}


def test_stop_session(client, manager):
    response = client.post("/api/stop", json={"agent_instance_id": "inst_1"})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    manager.destroy_instance.assert_awaited_once_with("inst_1")


def test_stop_session_error(client, manager):
    manager.destroy_instance.side_effect = InstanceTeardownError("already deleted")

    response = client.post("/api/stop", json={"agent_instance_id": "inst_1"})

    assert response.status_code == 500
    assert response.json() == {"error": "already deleted"}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {"event_type": "agent_started", "data": {"AgentInstanceId": "inst_1"}}},
        {"json": {"event_type": "something_new"}},
        {"json": ["not", "an", "object"]},
        {"content": b"not json", "headers": {"Content-Type": "application/json"}},
    ],
)
def test_callbacks_always_acknowledge(client, kwargs):
    with patch("rtc_agent.main.dispatch_callback", new=AsyncMock(return_value=True)) as mock_dispatch:
        response = client.post("/api/callbacks", **kwargs)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    mock_dispatch.assert_awaited_once()


def test_callbacks_forward_event(client):
    with patch("rtc_agent.main.dispatch_callback", new=AsyncMock(return_value=True)) as mock_dispatch:
        client.post("/api/callbacks", json={"event_type": "llm_response", "data": "Hi"})

    event = mock_dispatch.await_args.args[0]
    assert event.event_type == "llm_response"
    assert event.data == "Hi"


def test_lifespan_builds_manager_from_environment(monkeypatch):
    monkeypatch.setenv("RTC_APP_ID", "1234567")
    monkeypatch.setenv("RTC_SERVER_SECRET", "secret")
    monkeypatch.setenv("RTC_API_BASE_URL", "https://rtc-api.example.com/")

    with TestClient(app):
        assert isinstance(app.state.instance_manager, InstanceLifecycleManager)


def test_app_configuration():
    """Test the module level app is configured correctly"""
    assert app.title == APP_NAME
    assert app.version == APP_VERSION

    route_paths = [route.path for route in app.routes]
    for path in ("/api/start", "/api/send-message", "/api/stop", "/api/callbacks", "/health", "/"):
        assert path in route_paths
