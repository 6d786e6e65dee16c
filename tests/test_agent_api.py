"""
Tests for the client side wrapper of the backend proxy API.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rtc_agent.errors import InstanceCreationError, InstanceTeardownError, SendError
from rtc_agent.services.agent_api import AgentAPIClient


@pytest.fixture
def api():
    return AgentAPIClient("http://localhost:8080/", timeout=5)


def make_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.mark.asyncio
async def test_start_session(api):
    response = make_response({"success": True, "agentInstanceId": "inst_1", "agentId": "agent_1"})

    with patch("requests.post", return_value=response) as mock_post:
        started = await api.start_session("room_1", "user_1")

    assert started.agentInstanceId == "inst_1"
    assert started.agentId == "agent_1"
    mock_post.assert_called_once_with(
        "http://localhost:8080/api/start",
        json={"room_id": "room_1", "user_id": "user_1", "user_stream_id": "user_1_stream"},
        timeout=5,
    )


@pytest.mark.asyncio
async def test_start_session_backend_error(api):
    with patch("requests.post", return_value=make_response({"error": "room is full"}, 500)):
        with pytest.raises(InstanceCreationError) as exc_info:
            await api.start_session("room_1", "user_1")

    assert exc_info.value.message == "room is full"


@pytest.mark.asyncio
async def test_start_session_invalid_response(api):
    with patch("requests.post", return_value=make_response({"success": True})):
        with pytest.raises(InstanceCreationError):
            await api.start_session("room_1", "user_1")


@pytest.mark.asyncio
async def test_send_message(api):
    with patch("requests.post", return_value=make_response({"success": True})) as mock_post:
        await api.send_message("inst_1", "hello")

    assert mock_post.call_args.args[0] == "http://localhost:8080/api/send-message"
    assert mock_post.call_args.kwargs["json"] == {
        "agent_instance_id": "inst_1",
        "message": "hello",
    }


@pytest.mark.asyncio
async def test_send_message_network_error(api):
    with patch("requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(SendError):
            await api.send_message("inst_1", "hello")


@pytest.mark.asyncio
async def test_stop_session_error_without_body(api):
    response = make_response(None, 502)
    response.json.side_effect = ValueError("not json")

    with patch("requests.post", return_value=response):
        with pytest.raises(InstanceTeardownError) as exc_info:
            await api.stop_session("inst_1")

    assert exc_info.value.message == "/api/stop returned HTTP 502"
