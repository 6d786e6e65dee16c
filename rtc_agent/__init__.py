"""
RTC Agent - session and streaming-protocol layer for hosted conversational AI agents

This package lets a user hold a mixed text/voice conversation with an AI agent
hosted by a real-time communication (RTC) vendor. The agent joins the user's RTC
room and streams its answers back as room messages.

Architecture Overview:
- A FastAPI backend proxy holding the vendor credentials: it signs every control
  API call, registers the agent template once per process, and creates,
  messages and deletes agent instances on behalf of the client.
- A client session layer: a state machine that joins the room and provisions
  the agent through the backend, a reconciler that merges streamed answer
  fragments into messages, and a voice coordinator that turns final speech
  transcripts into outgoing messages.

Key Components:
- config: Constants, logging setup and environment settings
- models: Pydantic models for the vendor API, the backend API, room messages and
  conversations
- services: Request signer, vendor client, agent registry, instance manager and
  the client side backend API wrapper
- handlers: Vendor callback handlers
- client: Session state machine, reconciler, voice coordinator, conversation
  store and capability adapters
- main: The FastAPI application

Getting Started:
1. Set up environment variables:
   - RTC_APP_ID, RTC_SERVER_SECRET, RTC_API_BASE_URL: vendor credentials
   - LLM_URL, LLM_API_KEY, LLM_MODEL: the LLM the agent should call
   - PORT: Port to run the server on (default 8080)
   - LOG_LEVEL: Logging level (default INFO)

2. Start the server:
   ```bash
   python run.py
   ```

3. Point the vendor's callback URL at http://your-server:8080/api/callbacks
"""

__version__ = "1.0.0"
