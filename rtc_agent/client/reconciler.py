"""
Reconciliation of streamed AI answer fragments into the displayed message list.

The agent streams each answer as a series of room messages carrying the
cumulative text so far, keyed by a vendor assigned message id, with an end flag
on the last one. Fragments may be delivered more than once and fragments of
different answers may interleave. The reconciler keeps exactly one message per
id, replaces its content with each new cumulative text, and finalizes it once:
a final message is archived to the conversation store, optionally spoken, and
never changes again.

User messages are appended optimistically, before the network confirms them.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from pydantic import ValidationError

from rtc_agent.client.capabilities import SpeechSynthesizer
from rtc_agent.client.memory import JsonConversationStore
from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.errors import SynthesisError
from rtc_agent.models.chat import ConversationRecord, Message, VoiceSettings
from rtc_agent.models.room_schemas import LLMTextFragment, RoomMessage

logger = logging.getLogger(LOGGER_NAME)


class MessageStreamReconciler:
    """Owns the client's message list for the active conversation."""

    def __init__(
        self,
        store: JsonConversationStore,
        synthesizer: Optional[SpeechSynthesizer] = None,
        on_change: Optional[Callable[[Message], None]] = None,
    ):
        self.store = store
        self.synthesizer = synthesizer
        self.on_change = on_change
        self.messages: List[Message] = []
        self.conversation_id: Optional[str] = None
        self.voice_settings = VoiceSettings()
        self._positions: Dict[str, int] = {}
        self._playback_tasks: Set[asyncio.Task] = set()

    def reset(
        self,
        conversation: ConversationRecord,
        voice_settings: Optional[VoiceSettings] = None,
    ) -> None:
        """Start reconciling for a conversation, seeded with its archived messages."""
        self.conversation_id = conversation.id
        self.messages = [message.model_copy() for message in conversation.messages]
        self._positions = {message.id: i for i, message in enumerate(self.messages)}
        if voice_settings is not None:
            self.voice_settings = voice_settings

    def get_message(self, message_id: str) -> Optional[Message]:
        position = self._positions.get(message_id)
        return self.messages[position] if position is not None else None

    def _append(self, message: Message) -> None:
        self._positions[message.id] = len(self.messages)
        self.messages.append(message)

    def _notify(self, message: Message) -> None:
        if self.on_change is not None:
            self.on_change(message)

    def _archive(self, message: Message) -> None:
        if self.conversation_id is None:
            logger.warning(f"No active conversation, message {message.id} not archived")
            return
        self.store.add_message(self.conversation_id, message.model_copy())

    def add_user_message(self, content: str) -> Message:
        """Append and archive a user message before it is sent."""
        message = Message(content=content, sender="user")
        self._append(message)
        self._notify(message)
        self._archive(message)
        return message

    def apply_fragment(self, fragment: LLMTextFragment) -> Optional[Message]:
        """
        Merge one fragment into the message list.

        Args:
            fragment: Cumulative text for a message id plus its end flag

        Returns:
            The message if this fragment finalized it, otherwise None. Duplicate
            fragments and fragments for already final messages return None and
            change nothing.
        """
        message = self.get_message(fragment.MessageId)

        if message is None:
            message = Message(
                id=fragment.MessageId,
                content=fragment.Text,
                sender="ai",
                is_streaming=not fragment.EndFlag,
            )
            self._append(message)
            self._notify(message)
            if fragment.EndFlag:
                self._archive(message)
                return message
            return None

        if not message.is_streaming:
            if fragment.Text != message.content:
                logger.debug(f"Ignoring fragment for finalized message {message.id}")
            return None

        if fragment.Text == message.content and not fragment.EndFlag:
            return None

        message.content = fragment.Text
        message.is_streaming = not fragment.EndFlag
        self._notify(message)
        if message.is_streaming:
            return None

        self._archive(message)
        return message

    async def handle_fragment(self, fragment: LLMTextFragment) -> Optional[Message]:
        """Apply a fragment and start speech playback when it completed a message."""
        finalized = self.apply_fragment(fragment)
        if finalized is not None and finalized.content.strip():
            self._schedule_playback(finalized.content)
        return finalized

    async def handle_room_message(self, data: Dict[str, Any]) -> None:
        """Room subscription entry point; non LLM text messages are ignored."""
        try:
            room_message = RoomMessage(**data)
            fragment = LLMTextFragment.from_room_message(room_message)
        except (TypeError, ValidationError) as e:
            logger.warning(f"Ignoring malformed room message: {e}")
            return

        if fragment is None:
            logger.debug(f"Ignoring room message with command {room_message.Cmd}")
            return

        await self.handle_fragment(fragment)

    def _schedule_playback(self, text: str) -> None:
        if self.synthesizer is None or not self.voice_settings.should_speak:
            return
        task = asyncio.create_task(self._speak(text, self.voice_settings.model_copy()))
        self._playback_tasks.add(task)
        task.add_done_callback(self._playback_tasks.discard)

    async def _speak(self, text: str, settings: VoiceSettings) -> None:
        try:
            await self.synthesizer.speak(text, settings)
        except SynthesisError as e:
            logger.error(f"Speech playback failed: {e}")
        except Exception as e:
            logger.error(f"Unexpected speech playback error: {e}", exc_info=True)

    async def drain_playback(self) -> None:
        """Wait for all scheduled speech playback to finish."""
        if self._playback_tasks:
            await asyncio.gather(*list(self._playback_tasks), return_exceptions=True)

    async def cancel_playback(self) -> None:
        """Cancel speech playback that has not finished yet."""
        tasks = list(self._playback_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
