"""
Microphone capture and speech recognition coordination.

While recording, interim transcripts only update ``current_transcript``; each
final, non-blank transcript is forwarded through ``on_transcript`` and clears
the buffer. Recording continues until :meth:`VoiceCaptureCoordinator.stop` or a
capture/recognition error.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from rtc_agent.client.capabilities import AudioCapture, SpeechRecognizer
from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.errors import CaptureError

logger = logging.getLogger(LOGGER_NAME)

UtteranceHandler = Callable[[str], Awaitable[None]]
CaptureErrorHandler = Callable[[CaptureError], Awaitable[None]]


class VoiceCaptureCoordinator:
    """Couples a microphone capture with a speech recognizer."""

    def __init__(self, recognizer: SpeechRecognizer, capture: AudioCapture):
        self.recognizer = recognizer
        self.capture = capture
        self.is_recording = False
        self.current_transcript = ""
        self._on_transcript: Optional[UtteranceHandler] = None
        self._on_error: Optional[CaptureErrorHandler] = None

    async def start(
        self, on_transcript: UtteranceHandler, on_error: CaptureErrorHandler
    ) -> bool:
        """
        Acquire the microphone and start recognition concurrently.

        Args:
            on_transcript: Awaited with each final, trimmed transcript
            on_error: Awaited with a CaptureError when recording fails

        Returns:
            True if recording started, False otherwise (the error has been
            reported through ``on_error`` and all resources released)
        """
        if self.is_recording:
            return True

        self._on_transcript = on_transcript
        self._on_error = on_error
        self.current_transcript = ""

        results = await asyncio.gather(
            self.capture.open(),
            self.recognizer.start(self._handle_result, self._handle_error),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            logger.error(f"Failed to start voice recording: {failures[0]}")
            await self._release()
            await on_error(self._as_capture_error(failures[0]))
            return False

        self.is_recording = True
        logger.info("Voice recording started")
        return True

    async def stop(self) -> None:
        """Stop recognition and release the microphone, whatever state they are in."""
        await self._release()
        if self.is_recording:
            logger.info("Voice recording stopped")
        self.is_recording = False
        self.current_transcript = ""

    async def _release(self) -> None:
        try:
            await self.recognizer.stop()
        except Exception as e:
            logger.warning(f"Error stopping speech recognition: {e}")
        finally:
            try:
                await self.capture.close()
            except Exception as e:
                logger.warning(f"Error releasing microphone: {e}")

    async def _handle_result(self, transcript: str, is_final: bool) -> None:
        if not self.is_recording:
            return

        self.current_transcript = transcript
        text = transcript.strip()
        if not is_final or not text:
            return

        self.current_transcript = ""
        if self._on_transcript is not None:
            await self._on_transcript(text)

    async def _handle_error(self, error: Exception) -> None:
        logger.error(f"Voice recording error: {error}")
        await self.stop()
        if self._on_error is not None:
            await self._on_error(self._as_capture_error(error))

    @staticmethod
    def _as_capture_error(error: BaseException) -> CaptureError:
        if isinstance(error, CaptureError):
            return error
        return CaptureError(f"Speech recognition error: {error}")
