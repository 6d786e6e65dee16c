"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for protocol names, vendor action identifiers and
default agent template values.
"""

# Logger name used throughout the application
LOGGER_NAME = "rtc_agent"

# Vendor control API signing
SIGNATURE_VERSION = "2.0"
NONCE_BYTES = 16
VENDOR_SUCCESS_CODE = 0
VENDOR_REQUEST_TIMEOUT = 30  # seconds

# Vendor control API actions
ACTION_REGISTER_AGENT = "RegisterAgent"
ACTION_CREATE_AGENT_INSTANCE = "CreateAgentInstance"
ACTION_SEND_AGENT_INSTANCE_LLM = "SendAgentInstanceLLM"
ACTION_DELETE_AGENT_INSTANCE = "DeleteAgentInstance"

# Agent template defaults
DEFAULT_AGENT_NAME = "AI Assistant"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Respond naturally and conversationally."
)
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TTS_VENDOR = "BytePlus"
DEFAULT_TTS_VOICE_ID = "BV700_streaming"
DEFAULT_ASR_VENDOR = "BytePlus"
DEFAULT_ASR_LANGUAGE = "en"

# Room message command carrying streamed LLM text
ROOM_CMD_LLM_TEXT = 4

# Vendor callback event types
CALLBACK_AGENT_STARTED = "agent_started"
CALLBACK_AGENT_STOPPED = "agent_stopped"
CALLBACK_LLM_RESPONSE = "llm_response"

# Client defaults
DEFAULT_AGENT_API_BASE_URL = "http://localhost:8080"
AGENT_API_TIMEOUT = 30  # seconds
DEFAULT_CONVERSATION_TITLE = "New Conversation"
CONVERSATION_TITLE_LENGTH = 50
