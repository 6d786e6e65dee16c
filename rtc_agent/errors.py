"""
Exception types raised by the backend proxy and the client session layer.

Vendor failures carry the vendor's message (and status code when one was
returned) so callers can surface it verbatim.
"""

from typing import Optional


class RtcAgentError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(RtcAgentError):
    """Required credentials or endpoints are missing. Fatal at startup."""


class VendorError(RtcAgentError):
    """The RTC vendor rejected, or could not be reached for, a signed call."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class VendorRequestError(VendorError):
    """The signed request never produced a usable response envelope."""


class RegistrationError(VendorError):
    """The agent template was rejected. A later call may retry."""


class InstanceCreationError(VendorError):
    """An agent instance could not be created for the room."""


class InstanceTeardownError(VendorError):
    """An agent instance could not be deleted."""


class SendError(VendorError):
    """A user utterance could not be delivered to the agent instance."""


class TransportError(RtcAgentError):
    """Joining or leaving the RTC room failed."""


class CaptureError(RtcAgentError):
    """Microphone or speech recognition failure."""


class SynthesisError(RtcAgentError):
    """Speech playback failure."""


class SessionStateError(RtcAgentError):
    """A session operation was invoked in a state that does not allow it."""
