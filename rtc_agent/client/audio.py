"""
Local audio adapters: PyAudio microphone capture and pyttsx3 speech playback.

Both libraries block, so device and engine calls run on worker threads.
"""

import asyncio
import logging
from typing import Callable, List, Optional

import pyaudio
import pyttsx3

from rtc_agent.client.capabilities import AudioCapture, SpeechSynthesizer
from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.errors import CaptureError, SynthesisError
from rtc_agent.models.chat import VoiceSettings

logger = logging.getLogger(LOGGER_NAME)

# Audio capture parameters
FORMAT = pyaudio.paInt16
CHANNELS = 1
RATE = 16000
CHUNK = 960

# pyttsx3 speaks at roughly 200 words per minute by default
BASE_SPEECH_RATE = 200
SPEECH_VOLUME = 0.8


class PyAudioCapture(AudioCapture):
    """Opens the default input device; captured frames go to ``on_audio`` if given."""

    def __init__(
        self,
        on_audio: Optional[Callable[[bytes], None]] = None,
        rate: int = RATE,
        channels: int = CHANNELS,
        chunk: int = CHUNK,
    ):
        self.on_audio = on_audio
        self.rate = rate
        self.channels = channels
        self.chunk = chunk
        self._pyaudio = None
        self._stream = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    async def open(self) -> None:
        if self._stream is not None:
            return
        try:
            await asyncio.to_thread(self._open_stream)
        except Exception as e:
            raise CaptureError(f"Microphone access denied: {e}") from e
        logger.info("Microphone opened")

    def _open_stream(self) -> None:
        self._pyaudio = pyaudio.PyAudio()
        try:
            self._stream = self._pyaudio.open(
                format=FORMAT,
                channels=self.channels,
                rate=self.rate,
                input=True,
                frames_per_buffer=self.chunk,
                stream_callback=self._audio_callback,
            )
            self._stream.start_stream()
        except Exception:
            self._stream = None
            self._pyaudio.terminate()
            self._pyaudio = None
            raise

    def _audio_callback(self, in_data, frame_count, time_info, status):
        if self.on_audio is not None:
            self.on_audio(in_data)
        return (in_data, pyaudio.paContinue)

    async def close(self) -> None:
        if self._stream is None and self._pyaudio is None:
            return
        await asyncio.to_thread(self._close_stream)
        logger.info("Microphone released")

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        audio, self._pyaudio = self._pyaudio, None
        try:
            if stream is not None:
                stream.stop_stream()
                stream.close()
        finally:
            if audio is not None:
                audio.terminate()


class Pyttsx3Synthesizer(SpeechSynthesizer):
    """
    Speaks text through the platform's speech engine via pyttsx3.

    A new utterance interrupts the one currently playing, and cancelling a
    ``speak`` call stops the engine mid-utterance. pyttsx3 has no pitch
    control, so ``VoiceSettings.speech_pitch`` is not applied.
    """

    def __init__(self, engine=None):
        self._engine = engine
        self._lock = asyncio.Lock()

    def _get_engine(self):
        if self._engine is None:
            self._engine = pyttsx3.init()
        return self._engine

    async def speak(self, text: str, settings: VoiceSettings) -> None:
        if not settings.is_enabled:
            return
        if self._lock.locked():
            self._stop_engine()
        # The engine plays one utterance at a time
        async with self._lock:
            try:
                await asyncio.to_thread(self._speak_blocking, text, settings)
            except asyncio.CancelledError:
                self._stop_engine()
                raise
            except Exception as e:
                raise SynthesisError(f"Speech synthesis failed: {e}") from e

    def _stop_engine(self) -> None:
        if self._engine is None:
            return
        try:
            self._engine.stop()
        except Exception as e:
            logger.warning(f"Error stopping speech playback: {e}")

    def _speak_blocking(self, text: str, settings: VoiceSettings) -> None:
        engine = self._get_engine()
        engine.setProperty("rate", int(BASE_SPEECH_RATE * settings.speech_rate))
        engine.setProperty("volume", SPEECH_VOLUME)

        if settings.preferred_voice:
            for voice in engine.getProperty("voices"):
                if voice.name == settings.preferred_voice:
                    engine.setProperty("voice", voice.id)
                    break

        engine.say(text)
        engine.runAndWait()

    def available_voices(self) -> List[str]:
        return [voice.name for voice in self._get_engine().getProperty("voices")]
