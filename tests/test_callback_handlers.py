"""
Tests for vendor callback dispatch.
"""

from unittest.mock import AsyncMock, patch

import pytest

from rtc_agent.handlers.callback_handlers import CALLBACK_HANDLERS, dispatch_callback
from rtc_agent.models.api_schemas import CallbackEvent


def test_handlers_registered():
    assert set(CALLBACK_HANDLERS) == {"agent_started", "agent_stopped", "llm_response"}


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ["agent_started", "agent_stopped", "llm_response"])
async def test_known_events_dispatched(event_type):
    mock_handler = AsyncMock()

    with patch.dict(CALLBACK_HANDLERS, {event_type: mock_handler}):
        handled = await dispatch_callback(
            CallbackEvent(event_type=event_type, data={"AgentInstanceId": "inst_1"})
        )

    assert handled is True
    mock_handler.assert_awaited_once_with({"AgentInstanceId": "inst_1"})


@pytest.mark.asyncio
async def test_real_handlers_accept_any_payload():
    for event_type in CALLBACK_HANDLERS:
        assert await dispatch_callback(CallbackEvent(event_type=event_type, data=None))
        assert await dispatch_callback(CallbackEvent(event_type=event_type, data=[1, 2]))


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type", ["unknown_event", None])
async def test_unknown_events_ignored(event_type):
    assert await dispatch_callback(CallbackEvent(event_type=event_type)) is False


@pytest.mark.asyncio
async def test_handler_error_does_not_propagate():
    failing = AsyncMock(side_effect=RuntimeError("handler failed"))

    with patch.dict(CALLBACK_HANDLERS, {"agent_started": failing}):
        handled = await dispatch_callback(CallbackEvent(event_type="agent_started"))

    assert handled is True
    failing.assert_awaited_once()
