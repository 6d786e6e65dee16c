"""
Client session layer for conversations with a hosted RTC agent.

Key components:
- session: The session state machine (IDLE, CONNECTING, ACTIVE, ENDING) driving
  room join/leave, agent instance provisioning and outbound messages.
- reconciler: Merges streamed AI answer fragments into the message list,
  archives final messages and triggers speech playback.
- voice: Coordinates microphone capture and speech recognition, forwarding final
  transcripts as user messages.
- memory: JSON backed store of conversation records.
- capabilities: Interfaces for the room transport, microphone, recognizer and
  synthesizer.
- transport / audio: WebSocket room transport, PyAudio capture and pyttsx3
  playback adapters (audio requires the ``audio`` extra).

Usage examples:
```python
from rtc_agent.client.memory import JsonConversationStore
from rtc_agent.client.reconciler import MessageStreamReconciler
from rtc_agent.client.session import SessionStateMachine
from rtc_agent.client.transport import WebSocketRoomTransport
from rtc_agent.services.agent_api import AgentAPIClient

store = JsonConversationStore("conversations.json")
session = SessionStateMachine(
    transport=WebSocketRoomTransport("ws://localhost:9000/room"),
    agent_api=AgentAPIClient("http://localhost:8080"),
    store=store,
    reconciler=MessageStreamReconciler(store),
)
if await session.start():
    await session.send_text_message("hello")
    ...
    await session.end()
```
"""

# Client module initialization
