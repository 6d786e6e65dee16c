"""
Pydantic models for the RTC vendor control API.

Field names follow the vendor's wire format (PascalCase), so ``model_dump()``
produces request bodies that can be posted as-is.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from rtc_agent.config.constants import (
    DEFAULT_AGENT_NAME,
    DEFAULT_ASR_LANGUAGE,
    DEFAULT_ASR_VENDOR,
    DEFAULT_MAX_TOKENS,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    DEFAULT_TTS_VENDOR,
    DEFAULT_TTS_VOICE_ID,
    VENDOR_SUCCESS_CODE,
)


class VendorResponse(BaseModel):
    """Response envelope returned by every vendor action."""

    Code: int = Field(..., description="Zero on success")
    Message: str = Field("", description="Vendor status message")
    Data: Optional[Dict[str, Any]] = Field(None, description="Action specific payload")

    @property
    def ok(self) -> bool:
        return self.Code == VENDOR_SUCCESS_CODE


# Agent template
class LLMConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    Url: Optional[str] = None
    ApiKey: Optional[str] = None
    Model: Optional[str] = None
    SystemPrompt: str = DEFAULT_SYSTEM_PROMPT
    Temperature: float = DEFAULT_TEMPERATURE
    TopP: float = DEFAULT_TOP_P
    Params: Dict[str, Any] = Field(default_factory=lambda: {"max_tokens": DEFAULT_MAX_TOKENS})


class TTSConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    Vendor: str = DEFAULT_TTS_VENDOR
    VoiceId: str = DEFAULT_TTS_VOICE_ID
    Speed: float = 1.0
    Volume: float = 1.0


class ASRConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    Vendor: str = DEFAULT_ASR_VENDOR
    Language: str = DEFAULT_ASR_LANGUAGE


class AgentTemplate(BaseModel):
    """Agent configuration registered once with the vendor."""

    model_config = ConfigDict(frozen=True)

    AgentId: str = Field(..., description="Locally generated agent id")
    Name: str = DEFAULT_AGENT_NAME
    LLM: LLMConfig = Field(default_factory=LLMConfig)
    TTS: TTSConfig = Field(default_factory=TTSConfig)
    ASR: ASRConfig = Field(default_factory=ASRConfig)


# Instance actions
class CreateAgentInstanceRequest(BaseModel):
    AgentId: str
    RoomId: str
    UserId: str
    UserStreamId: str


class SendAgentInstanceLLMRequest(BaseModel):
    AgentInstanceId: str
    Content: str


class DeleteAgentInstanceRequest(BaseModel):
    AgentInstanceId: str


class AgentInstance(BaseModel):
    """A live binding of the registered agent to a room/user pair."""

    instance_id: str
    agent_id: str
    room_id: str
    user_id: str
    user_stream_id: str
