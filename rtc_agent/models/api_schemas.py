"""
Pydantic models for the backend proxy HTTP API.

These models are shared by the FastAPI routes and by the client's API wrapper,
so both sides agree on field names (snake_case requests, camelCase ids in the
start response).
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


def _not_blank(value: str, name: str) -> str:
    if not value.strip():
        raise ValueError(f"{name} cannot be empty")
    return value


# Requests
class StartSessionRequest(BaseModel):
    """Body of POST /api/start."""

    room_id: str = Field(..., description="RTC room the agent should join")
    user_id: str = Field(..., description="Local user id inside the room")
    user_stream_id: Optional[str] = Field(
        None, description="Stream the agent listens to, defaults to <user_id>_stream"
    )

    @field_validator("room_id")
    def validate_room_id(cls, v):
        return _not_blank(v, "room_id")

    @field_validator("user_id")
    def validate_user_id(cls, v):
        return _not_blank(v, "user_id")


class SendMessageRequest(BaseModel):
    """Body of POST /api/send-message."""

    agent_instance_id: str
    message: str

    @field_validator("agent_instance_id")
    def validate_agent_instance_id(cls, v):
        return _not_blank(v, "agent_instance_id")


class StopSessionRequest(BaseModel):
    """Body of POST /api/stop."""

    agent_instance_id: str

    @field_validator("agent_instance_id")
    def validate_agent_instance_id(cls, v):
        return _not_blank(v, "agent_instance_id")


class CallbackEvent(BaseModel):
    """Vendor pushed lifecycle event. Every field is optional so nothing is rejected."""

    event_type: Optional[str] = None
    data: Any = None


# Responses
class StartSessionResponse(BaseModel):
    success: bool = True
    agentInstanceId: str
    agentId: str


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: str
    registeredAgent: bool
