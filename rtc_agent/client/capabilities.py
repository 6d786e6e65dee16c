"""
Capability interfaces consumed by the client session layer.

The RTC media stack, speech recognition and speech synthesis are external
collaborators. The session layer only depends on these small interfaces, so
concrete adapters (or test doubles) can be swapped in at construction time.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.models.chat import VoiceSettings

logger = logging.getLogger(LOGGER_NAME)

RoomMessageHandler = Callable[[Dict[str, Any]], Awaitable[None]]
TranscriptHandler = Callable[[str, bool], Awaitable[None]]
RecognitionErrorHandler = Callable[[Exception], Awaitable[None]]


class Subscription:
    """Cancelable registration of a handler; cancelling twice is harmless."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe: Optional[Callable[[], None]] = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def cancel(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()


class RoomTransport(ABC):
    """
    Room join/leave plus an explicit subscription to inbound room messages.

    Subclasses call :meth:`dispatch` for every decoded room message.
    """

    def __init__(self):
        self._handlers: Dict[int, RoomMessageHandler] = {}
        self._next_token = 0

    @abstractmethod
    async def join(self, room_id: str, user_id: str) -> None:
        """Join the room. Raises TransportError on failure."""

    @abstractmethod
    async def leave(self) -> None:
        """Leave the current room. Raises TransportError on failure."""

    def subscribe(self, handler: RoomMessageHandler) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = handler
        return Subscription(lambda: self._handlers.pop(token, None))

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    async def dispatch(self, message: Dict[str, Any]) -> None:
        for handler in list(self._handlers.values()):
            try:
                await handler(message)
            except Exception as e:
                logger.error(f"Room message handler failed: {e}", exc_info=True)


class AudioCapture(ABC):
    """Microphone device access."""

    @abstractmethod
    async def open(self) -> None:
        """Acquire the microphone. Raises CaptureError on failure."""

    @abstractmethod
    async def close(self) -> None:
        """Release the microphone."""


class SpeechRecognizer(ABC):
    """Streaming speech-to-text delivering interim and final transcripts."""

    @abstractmethod
    async def start(
        self, on_result: TranscriptHandler, on_error: RecognitionErrorHandler
    ) -> None:
        """Start recognition. ``on_result(transcript, is_final)`` is awaited per result."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop recognition."""


class SpeechSynthesizer(ABC):
    """Text-to-speech playback."""

    @abstractmethod
    async def speak(self, text: str, settings: VoiceSettings) -> None:
        """Speak the text. Raises SynthesisError on failure."""
