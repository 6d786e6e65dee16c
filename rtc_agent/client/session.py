"""
Client session state machine.

A session moves ``IDLE -> CONNECTING -> ACTIVE -> ENDING -> IDLE``. Starting
joins a fresh RTC room and asks the backend for an agent instance bound to it;
only when both succeed does the session become ACTIVE and subscribe the
reconciler to the room's messages. Ending stops recording first, then tears down
the agent instance and leaves the room concurrently, each best-effort, and
always returns to IDLE.

Recording is an orthogonal flag that is only valid while ACTIVE. Typed messages
are rejected while recording; final voice transcripts use the same send path.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from rtc_agent.client.capabilities import RoomTransport, Subscription
from rtc_agent.client.memory import JsonConversationStore, random_token
from rtc_agent.client.reconciler import MessageStreamReconciler
from rtc_agent.client.voice import VoiceCaptureCoordinator
from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.errors import (
    CaptureError,
    RtcAgentError,
    SendError,
    SessionStateError,
    TransportError,
)
from rtc_agent.models.chat import ChatSession, Message, VoiceSettings
from rtc_agent.services.agent_api import AgentAPIClient

logger = logging.getLogger(LOGGER_NAME)


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    ENDING = "ending"


class SessionStateMachine:
    """Drives one conversational session at a time."""

    def __init__(
        self,
        transport: RoomTransport,
        agent_api: AgentAPIClient,
        store: JsonConversationStore,
        reconciler: Optional[MessageStreamReconciler] = None,
        voice: Optional[VoiceCaptureCoordinator] = None,
        id_factory: Callable[[], str] = random_token,
    ):
        self.transport = transport
        self.agent_api = agent_api
        self.store = store
        self.reconciler = reconciler or MessageStreamReconciler(store)
        self.voice = voice
        self._id_factory = id_factory

        self.state = SessionState.IDLE
        self.session: Optional[ChatSession] = None
        self.last_error: Optional[Exception] = None
        self._subscription: Optional[Subscription] = None

    @property
    def is_connected(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def is_recording(self) -> bool:
        return bool(self.voice and self.voice.is_recording)

    @property
    def current_transcript(self) -> str:
        return self.voice.current_transcript if self.voice else ""

    @property
    def messages(self):
        return self.reconciler.messages

    async def start(self, conversation_id: Optional[str] = None) -> bool:
        """
        Join a new room and provision an agent instance for it.

        Args:
            conversation_id: Existing conversation to resume, a new one is created
                when omitted

        Returns:
            True if the session is ACTIVE, False if joining or provisioning failed
            or the start was abandoned by :meth:`end` (the state is back to IDLE
            and ``last_error`` holds the cause of a failure)

        Raises:
            SessionStateError: If a session is already connecting or active
        """
        if self.state is not SessionState.IDLE:
            raise SessionStateError(f"Cannot start a session while {self.state.value}")

        self.state = SessionState.CONNECTING
        self.last_error = None
        room_id = f"room_{self._id_factory()}"
        user_id = f"user_{self._id_factory()}"

        try:
            await self.transport.join(room_id, user_id)
        except asyncio.CancelledError:
            logger.warning(f"Session start cancelled while joining room {room_id}")
            await self._abandon_start()
            raise
        except Exception as e:
            logger.error(f"Failed to join room {room_id}: {e}")
            self._abort_start(e if isinstance(e, TransportError) else TransportError(str(e)))
            return False

        if self.state is not SessionState.CONNECTING:
            await self._abandon_start()
            return False

        try:
            started = await self.agent_api.start_session(room_id, user_id)
        except asyncio.CancelledError:
            logger.warning(f"Session start cancelled while provisioning room {room_id}")
            await self._abandon_start()
            raise
        except Exception as e:
            logger.error(f"Failed to start session: {e}")
            await self._leave_room()
            self._abort_start(e)
            return False

        # end() was called while the agent was being provisioned
        if self.state is not SessionState.CONNECTING:
            await self._abandon_start(started.agentInstanceId)
            return False

        conversation = self.store.create_or_get(conversation_id)
        voice_settings = VoiceSettings()
        self.reconciler.reset(conversation, voice_settings)
        self.session = ChatSession(
            room_id=room_id,
            user_id=user_id,
            agent_instance_id=started.agentInstanceId,
            conversation_id=conversation.id,
            voice_settings=voice_settings,
        )
        self._subscription = self.transport.subscribe(self._on_room_message)
        self.state = SessionState.ACTIVE

        logger.info(
            f"Session started in room {room_id} with agent instance {started.agentInstanceId}"
        )
        return True

    def _abort_start(self, error: Exception) -> None:
        self.last_error = error
        self.session = None
        self.state = SessionState.IDLE

    async def _abandon_start(self, agent_instance_id: Optional[str] = None) -> None:
        """Undo a start that was cancelled or ended before it completed."""
        logger.info("Discarding unfinished session start")
        try:
            if agent_instance_id is not None:
                await self._destroy_instance(agent_instance_id)
            await self._leave_room()
        finally:
            self.session = None
            self.state = SessionState.IDLE

    async def _on_room_message(self, data: Dict[str, Any]) -> None:
        if self.state is not SessionState.ACTIVE:
            return
        await self.reconciler.handle_room_message(data)

    async def send_text_message(self, content: str) -> Optional[Message]:
        """
        Send a typed message to the agent.

        Returns:
            The optimistically displayed user message, or None for blank input

        Raises:
            SessionStateError: If no session is active or recording is on
        """
        if self.is_recording:
            raise SessionStateError("Cannot send typed messages while recording")
        return await self._send(content)

    async def _send(self, content: str) -> Optional[Message]:
        if self.state is not SessionState.ACTIVE or self.session is None:
            raise SessionStateError("Cannot send a message without an active session")

        text = content.strip()
        if not text:
            return None

        message = self.reconciler.add_user_message(text)
        agent_instance_id = self.session.agent_instance_id
        try:
            await self.agent_api.send_message(agent_instance_id, text)
        except SendError as e:
            logger.error(f"Failed to send message: {e}")
            self.last_error = e
        return message

    async def _on_voice_transcript(self, transcript: str) -> None:
        if self.state is not SessionState.ACTIVE:
            return
        await self._send(transcript)

    async def _on_voice_error(self, error: CaptureError) -> None:
        logger.error(f"Voice recording error: {error}")
        self.last_error = error

    async def start_recording(self) -> bool:
        """
        Start voice capture. Final transcripts are sent as user messages.

        Raises:
            SessionStateError: If no session is active or no voice capture is configured
        """
        if self.state is not SessionState.ACTIVE:
            raise SessionStateError("Cannot record without an active session")
        if self.voice is None:
            raise SessionStateError("Voice capture is not configured")
        return await self.voice.start(self._on_voice_transcript, self._on_voice_error)

    async def stop_recording(self) -> None:
        if self.voice is not None:
            await self.voice.stop()

    async def toggle_recording(self) -> bool:
        """Start or stop recording; returns the new recording flag."""
        if self.is_recording:
            await self.stop_recording()
        else:
            await self.start_recording()
        return self.is_recording

    def toggle_voice_enabled(self) -> bool:
        """Flip speech playback on or off; returns the new value."""
        if self.session is None:
            raise SessionStateError("Cannot change voice settings without a session")
        settings = self.session.voice_settings
        settings.is_enabled = not settings.is_enabled
        return settings.is_enabled

    def update_voice_settings(self, **changes) -> VoiceSettings:
        """Apply voice setting changes (``speech_rate=1.2``, ``preferred_voice=...``)."""
        if self.session is None:
            raise SessionStateError("Cannot change voice settings without a session")
        settings = self.session.voice_settings
        for name in changes:
            if name not in VoiceSettings.model_fields:
                raise ValueError(f"Unknown voice setting: {name}")
        # Validate the whole update before touching the live settings
        updated = VoiceSettings.model_validate({**settings.model_dump(), **changes})
        for name in changes:
            setattr(settings, name, getattr(updated, name))
        return settings

    async def end(self) -> None:
        """
        End the active session.

        Recording is stopped first. Instance teardown and room leave then run
        concurrently; failures are logged and the state still returns to IDLE.
        Called while a start is in flight, the start is abandoned: it tears down
        whatever it provisioned and returns False.

        Raises:
            SessionStateError: If no session is connecting or active
        """
        if self.state is SessionState.CONNECTING:
            logger.info("Ending session before it finished starting")
            self.state = SessionState.ENDING
            return

        if self.state is not SessionState.ACTIVE or self.session is None:
            raise SessionStateError(f"Cannot end a session while {self.state.value}")

        self.state = SessionState.ENDING
        session = self.session

        try:
            if self.is_recording:
                await self.stop_recording()

            if self._subscription is not None:
                self._subscription.cancel()
                self._subscription = None

            await asyncio.gather(
                self._destroy_instance(session.agent_instance_id),
                self._leave_room(),
            )
            await self.reconciler.cancel_playback()
        finally:
            session.is_active = False
            self.session = None
            self.state = SessionState.IDLE
            logger.info(f"Session in room {session.room_id} ended")

    async def _destroy_instance(self, agent_instance_id: str) -> None:
        try:
            await self.agent_api.stop_session(agent_instance_id)
        except Exception as e:
            logger.error(f"Failed to stop agent instance {agent_instance_id}: {e}")
            self.last_error = e

    async def _leave_room(self) -> None:
        try:
            await self.transport.leave()
        except Exception as e:
            logger.error(f"Failed to leave room: {e}")
            self.last_error = e if isinstance(e, RtcAgentError) else TransportError(str(e))
