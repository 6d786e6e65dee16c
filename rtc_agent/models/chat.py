"""
Client side conversation models.

Messages and conversation records are persisted with camelCase keys
(``isStreaming``, ``createdAt``, ...). Python code uses the snake_case field
names; ``model_dump(by_alias=True)`` produces the stored shape.
"""

import time
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from rtc_agent.config.constants import DEFAULT_CONVERSATION_TITLE

MessageSender = Literal["user", "ai"]


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class Message(BaseModel):
    """A single chat message, either typed/spoken by the user or streamed by the agent."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    content: str
    sender: MessageSender
    timestamp: int = Field(default_factory=now_ms)
    type: str = "text"
    is_streaming: bool = Field(False, alias="isStreaming")


class VoiceSettings(BaseModel):
    """Speech playback preferences for a session."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    is_enabled: bool = Field(True, alias="isEnabled")
    auto_play: bool = Field(True, alias="autoPlay")
    speech_rate: float = Field(1.0, alias="speechRate", gt=0)
    speech_pitch: float = Field(1.0, alias="speechPitch", gt=0)
    preferred_voice: Optional[str] = Field(None, alias="preferredVoice")

    @property
    def should_speak(self) -> bool:
        return self.is_enabled and self.auto_play


class ChatSession(BaseModel):
    """The single active client session."""

    room_id: str
    user_id: str
    agent_instance_id: str
    conversation_id: str
    is_active: bool = True
    voice_settings: VoiceSettings = Field(default_factory=VoiceSettings)


class ConversationMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_messages: int = Field(0, alias="totalMessages")
    last_ai_response: str = Field("", alias="lastAIResponse")
    topics: List[str] = Field(default_factory=list)


class ConversationRecord(BaseModel):
    """Persisted conversation: ordered messages plus derived metadata."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = DEFAULT_CONVERSATION_TITLE
    messages: List[Message] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms, alias="createdAt")
    updated_at: int = Field(default_factory=now_ms, alias="updatedAt")
    metadata: ConversationMetadata = Field(default_factory=ConversationMetadata)
