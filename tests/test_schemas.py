"""
Tests for the pydantic models shared by the backend and the client.
"""

import pytest
from pydantic import ValidationError

from rtc_agent.models.api_schemas import (
    SendMessageRequest,
    StartSessionRequest,
    StopSessionRequest,
)
from rtc_agent.models.chat import ConversationRecord, Message, VoiceSettings
from rtc_agent.models.room_schemas import LLMTextFragment, RoomMessage
from rtc_agent.models.vendor_schemas import AgentTemplate, VendorResponse


def test_room_message_llm_text():
    message = RoomMessage(Cmd=4, Data={"MessageId": "m1", "Text": "Hi", "EndFlag": False})

    assert message.is_llm_text
    fragment = LLMTextFragment.from_room_message(message)
    assert fragment == LLMTextFragment(MessageId="m1", Text="Hi", EndFlag=False)


def test_room_message_other_command():
    message = RoomMessage(Cmd=1, Data={"Whatever": True})

    assert not message.is_llm_text
    assert LLMTextFragment.from_room_message(message) is None


def test_fragment_defaults():
    fragment = LLMTextFragment(MessageId="m1")

    assert fragment.Text == ""
    assert fragment.EndFlag is False


@pytest.mark.parametrize("message_id", ["", "   "])
def test_fragment_requires_message_id(message_id):
    with pytest.raises(ValidationError):
        LLMTextFragment(MessageId=message_id, Text="Hi")


def test_room_message_requires_cmd():
    with pytest.raises(ValidationError):
        RoomMessage(Data={})


@pytest.mark.parametrize(
    "model,kwargs",
    [
        (StartSessionRequest, {"room_id": " ", "user_id": "user_1"}),
        (StartSessionRequest, {"room_id": "room_1", "user_id": ""}),
        (SendMessageRequest, {"agent_instance_id": "", "message": "Hi"}),
        (StopSessionRequest, {"agent_instance_id": "  "}),
    ],
)
def test_api_requests_reject_blank_ids(model, kwargs):
    with pytest.raises(ValidationError):
        model(**kwargs)


def test_vendor_response_ok():
    assert VendorResponse(Code=0).ok
    assert not VendorResponse(Code=1, Message="failed").ok


def test_agent_template_is_frozen():
    template = AgentTemplate(AgentId="agent_1")

    with pytest.raises(ValidationError):
        template.AgentId = "agent_2"


def test_message_serializes_with_aliases():
    message = Message(content="Hi", sender="ai", is_streaming=True)
    data = message.model_dump(by_alias=True)

    assert data["isStreaming"] is True
    assert data["type"] == "text"
    assert Message(**data) == message


def test_message_rejects_unknown_sender():
    with pytest.raises(ValidationError):
        Message(content="Hi", sender="system")


def test_voice_settings_should_speak():
    assert VoiceSettings().should_speak
    assert not VoiceSettings(is_enabled=False).should_speak
    assert not VoiceSettings(autoPlay=False).should_speak


def test_voice_settings_rejects_non_positive_rate():
    with pytest.raises(ValidationError):
        VoiceSettings(speech_rate=0)


def test_conversation_record_round_trips_stored_shape():
    record = ConversationRecord(
        id="conv_1", messages=[Message(content="Hello", sender="user")]
    )
    stored = record.model_dump(by_alias=True)

    assert {"createdAt", "updatedAt"} <= set(stored)
    assert "totalMessages" in stored["metadata"]
    assert ConversationRecord(**stored) == record
