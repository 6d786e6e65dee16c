"""
Models module for data structures used by the backend proxy and the client.

Key components:
- vendor_schemas: The RTC vendor control API envelope, the agent template and
  the request bodies of the instance lifecycle actions.
- api_schemas: Requests and responses of the backend proxy HTTP API.
- room_schemas: Room messages pushed by the vendor, including streamed LLM text
  fragments.
- chat: Client side messages, voice settings, the active session and the
  persisted conversation record.

Usage examples:
```python
from rtc_agent.models.room_schemas import LLMTextFragment, RoomMessage

room_message = RoomMessage(**{"Cmd": 4, "Data": {"MessageId": "m1", "Text": "Hi", "EndFlag": False}})
fragment = LLMTextFragment.from_room_message(room_message)

from rtc_agent.models.chat import Message
message = Message(content="hello", sender="user")
message.model_dump(by_alias=True)  # {"id": ..., "isStreaming": False, ...}
```
"""

from rtc_agent.models.api_schemas import (
    CallbackEvent,
    ErrorResponse,
    HealthResponse,
    SendMessageRequest,
    StartSessionRequest,
    StartSessionResponse,
    StopSessionRequest,
    SuccessResponse,
)
from rtc_agent.models.chat import (
    ChatSession,
    ConversationMetadata,
    ConversationRecord,
    Message,
    VoiceSettings,
)
from rtc_agent.models.room_schemas import LLMTextFragment, RoomMessage
from rtc_agent.models.vendor_schemas import (
    AgentInstance,
    AgentTemplate,
    VendorResponse,
)
