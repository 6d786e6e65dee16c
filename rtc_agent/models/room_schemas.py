"""
Pydantic models for events pushed into the RTC room.

The agent streams its answer as a sequence of room messages with
``Cmd == ROOM_CMD_LLM_TEXT``. Each carries the cumulative text of one
answer so far, keyed by a vendor assigned ``MessageId``.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from rtc_agent.config.constants import ROOM_CMD_LLM_TEXT


class RoomMessage(BaseModel):
    """Envelope of every message received from the room."""

    Cmd: int = Field(..., description="Command discriminator")
    Data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_llm_text(self) -> bool:
        return self.Cmd == ROOM_CMD_LLM_TEXT


class LLMTextFragment(BaseModel):
    """One cumulative piece of a streamed AI answer."""

    MessageId: str = Field(..., description="Vendor assigned message id")
    Text: str = Field("", description="Cumulative text of the answer so far")
    EndFlag: bool = Field(False, description="True on the last fragment")

    @field_validator("MessageId")
    def validate_message_id(cls, v):
        """Validate that the message id is not empty."""
        if not v.strip():
            raise ValueError("MessageId cannot be empty")
        return v

    @classmethod
    def from_room_message(cls, message: RoomMessage) -> Optional["LLMTextFragment"]:
        """Extract the fragment payload, or None if the message is not LLM text."""
        if not message.is_llm_text:
            return None
        return cls(**message.Data)
