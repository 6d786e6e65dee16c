"""
Unit tests for agent instance creation, messaging and teardown.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from rtc_agent.errors import (
    InstanceCreationError,
    InstanceTeardownError,
    RegistrationError,
    SendError,
    VendorRequestError,
)
from rtc_agent.models.vendor_schemas import VendorResponse
from rtc_agent.services.agent_registry import AgentRegistry
from rtc_agent.services.instance_manager import (
    InstanceLifecycleManager,
    build_instance_manager,
    default_user_stream_id,
)
from rtc_agent.services.vendor_client import VendorClient


@pytest.fixture
def registry():
    registry = MagicMock()
    registry.ensure_registered = AsyncMock(return_value="agent_1")
    return registry


@pytest.fixture
def vendor_client():
    client = MagicMock()
    client.call = AsyncMock(
        return_value=VendorResponse(Code=0, Data={"AgentInstanceId": "inst_1"})
    )
    return client


@pytest.fixture
def manager(registry, vendor_client):
    return InstanceLifecycleManager(registry, vendor_client)


def test_default_user_stream_id():
    assert default_user_stream_id("user_abc") == "user_abc_stream"


@pytest.mark.asyncio
async def test_create_instance_registers_and_creates(manager, registry, vendor_client):
    instance = await manager.create_instance("room_1", "user_1")

    registry.ensure_registered.assert_awaited_once()
    vendor_client.call.assert_awaited_once_with(
        "CreateAgentInstance",
        {
            "AgentId": "agent_1",
            "RoomId": "room_1",
            "UserId": "user_1",
            "UserStreamId": "user_1_stream",
        },
    )
    assert instance.instance_id == "inst_1"
    assert instance.agent_id == "agent_1"
    assert instance.room_id == "room_1"
    assert instance.user_stream_id == "user_1_stream"


@pytest.mark.asyncio
async def test_create_instance_with_explicit_ids(manager, registry, vendor_client):
    instance = await manager.create_instance(
        "room_1", "user_1", user_stream_id="custom_stream", agent_id="agent_x"
    )

    registry.ensure_registered.assert_not_awaited()
    body = vendor_client.call.await_args.args[1]
    assert body["AgentId"] == "agent_x"
    assert body["UserStreamId"] == "custom_stream"
    assert instance.user_stream_id == "custom_stream"


@pytest.mark.asyncio
async def test_create_instance_rejected(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=2001, Message="room is full")

    with pytest.raises(InstanceCreationError) as exc_info:
        await manager.create_instance("room_1", "user_1")

    assert exc_info.value.message == "room is full"
    assert exc_info.value.code == 2001


@pytest.mark.asyncio
async def test_create_instance_without_instance_id(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=0, Data={})

    with pytest.raises(InstanceCreationError):
        await manager.create_instance("room_1", "user_1")


@pytest.mark.asyncio
async def test_create_instance_request_failure(manager, vendor_client):
    vendor_client.call.side_effect = VendorRequestError("CreateAgentInstance request failed")

    with pytest.raises(InstanceCreationError) as exc_info:
        await manager.create_instance("room_1", "user_1")

    assert exc_info.value.message == "CreateAgentInstance request failed"


@pytest.mark.asyncio
async def test_create_instance_registration_failure(manager, registry, vendor_client):
    registry.ensure_registered.side_effect = RegistrationError("Failed to register agent: bad")

    with pytest.raises(RegistrationError):
        await manager.create_instance("room_1", "user_1")

    vendor_client.call.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_utterance(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=0)

    await manager.send_utterance("inst_1", "Hello")

    vendor_client.call.assert_awaited_once_with(
        "SendAgentInstanceLLM", {"AgentInstanceId": "inst_1", "Content": "Hello"}
    )


@pytest.mark.asyncio
async def test_send_utterance_rejected(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=3001, Message="instance not found")

    with pytest.raises(SendError) as exc_info:
        await manager.send_utterance("inst_1", "Hello")

    assert exc_info.value.message == "instance not found"


@pytest.mark.asyncio
async def test_send_utterance_request_failure(manager, vendor_client):
    vendor_client.call.side_effect = VendorRequestError("timeout")

    with pytest.raises(SendError):
        await manager.send_utterance("inst_1", "Hello")


@pytest.mark.asyncio
async def test_destroy_instance(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=0)

    await manager.destroy_instance("inst_1")

    vendor_client.call.assert_awaited_once_with(
        "DeleteAgentInstance", {"AgentInstanceId": "inst_1"}
    )


@pytest.mark.asyncio
async def test_destroy_instance_rejected_uses_default_message(manager, vendor_client):
    vendor_client.call.return_value = VendorResponse(Code=4001)

    with pytest.raises(InstanceTeardownError) as exc_info:
        await manager.destroy_instance("inst_1")

    assert exc_info.value.message == "Failed to stop agent instance"


def test_build_instance_manager(vendor_settings):
    manager = build_instance_manager(vendor_settings)

    assert isinstance(manager, InstanceLifecycleManager)
    assert isinstance(manager.registry, AgentRegistry)
    assert isinstance(manager.vendor_client, VendorClient)
    assert manager.registry.vendor_client is manager.vendor_client
    assert manager.vendor_client.api_base_url == vendor_settings.api_base_url
    assert manager.vendor_client.signer.app_id == vendor_settings.app_id
