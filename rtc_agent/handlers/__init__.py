"""
Handlers module for vendor pushed events.

Key components:
- callback_handlers: Dispatch table for the lifecycle events the RTC vendor
  posts to /api/callbacks (agent started, agent stopped, LLM response).

Usage examples:
```python
from rtc_agent.handlers.callback_handlers import dispatch_callback
from rtc_agent.models.api_schemas import CallbackEvent

await dispatch_callback(CallbackEvent(event_type="agent_started", data={"room": "r1"}))
```
"""

# Handlers module initialization
