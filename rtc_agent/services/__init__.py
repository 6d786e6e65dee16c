"""
Services module for external API integrations.

This module provides the clients that talk to the RTC vendor control API (on the
backend) and to the backend proxy (on the client).

Key components:
- signer: Canonical-string HMAC-SHA256 signing of vendor requests.
- vendor_client: Posts signed actions and decodes the ``{Code, Message, Data}``
  envelope.
- agent_registry: Registers the agent template once per process.
- instance_manager: Creates, messages and destroys agent instances.
- agent_api: Client side wrapper of the backend's /api/start, /api/send-message
  and /api/stop routes.

Usage examples:
```python
from rtc_agent.config.settings import VendorSettings
from rtc_agent.services.instance_manager import build_instance_manager

manager = build_instance_manager(VendorSettings.from_env())
instance = await manager.create_instance("room_abc", "user_xyz")
await manager.send_utterance(instance.instance_id, "hello")
await manager.destroy_instance(instance.instance_id)
```
"""

# Services module initialization
