"""
Environment-driven settings for the backend proxy and the client.

Values are read from the process environment; the backend loads a ``.env``
file with python-dotenv before these models are built.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

from rtc_agent.config.constants import DEFAULT_AGENT_API_BASE_URL, DEFAULT_SYSTEM_PROMPT
from rtc_agent.errors import ConfigurationError

REQUIRED_VENDOR_VARIABLES = ("RTC_APP_ID", "RTC_SERVER_SECRET", "RTC_API_BASE_URL")


class VendorSettings(BaseModel):
    """Credentials and endpoints for the RTC vendor control API and the agent's LLM."""

    app_id: str = Field(..., description="Vendor application id")
    server_secret: str = Field(..., description="Shared secret used for request signing")
    api_base_url: str = Field(..., description="Vendor control API endpoint")
    llm_url: Optional[str] = Field(None, description="Chat completion endpoint the agent calls")
    llm_api_key: Optional[str] = Field(None, description="API key for the LLM endpoint")
    llm_model: Optional[str] = Field(None, description="Model name for the LLM endpoint")
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @classmethod
    def from_env(cls) -> "VendorSettings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: If any of the vendor credentials is missing
        """
        missing = [name for name in REQUIRED_VENDOR_VARIABLES if not os.getenv(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        return cls(
            app_id=os.environ["RTC_APP_ID"],
            server_secret=os.environ["RTC_SERVER_SECRET"],
            api_base_url=os.environ["RTC_API_BASE_URL"],
            llm_url=os.getenv("LLM_URL"),
            llm_api_key=os.getenv("LLM_API_KEY"),
            llm_model=os.getenv("LLM_MODEL"),
            system_prompt=os.getenv("AGENT_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
        )


class ClientSettings(BaseModel):
    """Endpoints used by the client session layer."""

    agent_api_base_url: str = DEFAULT_AGENT_API_BASE_URL
    room_gateway_url: Optional[str] = None
    conversations_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            agent_api_base_url=os.getenv("AGENT_API_BASE_URL", DEFAULT_AGENT_API_BASE_URL),
            room_gateway_url=os.getenv("ROOM_GATEWAY_URL"),
            conversations_file=os.getenv("CONVERSATIONS_FILE"),
        )
