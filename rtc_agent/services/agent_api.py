"""
Client for the backend proxy HTTP API.

The client session layer never talks to the vendor directly: it asks the
backend to start, message and stop agent instances. Calls use ``requests`` on a
worker thread; any failure is raised as the typed error of the operation,
carrying the backend's ``error`` message when one was returned.
"""

import asyncio
import logging
from typing import Any, Dict, Type

import requests
from pydantic import ValidationError

from rtc_agent.config.constants import AGENT_API_TIMEOUT, LOGGER_NAME
from rtc_agent.errors import (
    InstanceCreationError,
    InstanceTeardownError,
    SendError,
    VendorError,
)
from rtc_agent.models.api_schemas import (
    SendMessageRequest,
    StartSessionRequest,
    StartSessionResponse,
    StopSessionRequest,
)
from rtc_agent.services.instance_manager import default_user_stream_id

logger = logging.getLogger(LOGGER_NAME)


class AgentAPIClient:
    """Wraps POST /api/start, /api/send-message and /api/stop."""

    def __init__(self, base_url: str, timeout: float = AGENT_API_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def _post(
        self, path: str, payload: Dict[str, Any], error_type: Type[VendorError]
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await asyncio.to_thread(
                requests.post, url, json=payload, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request to {path} failed: {e}")
            raise error_type(f"Request to {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error") if isinstance(body, dict) else None
            raise error_type(message or f"{path} returned HTTP {response.status_code}")

        return body

    async def start_session(self, room_id: str, user_id: str) -> StartSessionResponse:
        """
        Ask the backend to create an agent instance bound to the room.

        Raises:
            InstanceCreationError: If the backend could not create the instance
        """
        request = StartSessionRequest(
            room_id=room_id, user_id=user_id, user_stream_id=default_user_stream_id(user_id)
        )
        body = await self._post("/api/start", request.model_dump(), InstanceCreationError)

        try:
            return StartSessionResponse(**body)
        except (TypeError, ValidationError) as e:
            raise InstanceCreationError("Backend returned an invalid start response") from e

    async def send_message(self, agent_instance_id: str, message: str) -> None:
        """
        Forward a user utterance to the agent instance.

        Raises:
            SendError: If the backend did not accept the message
        """
        request = SendMessageRequest(agent_instance_id=agent_instance_id, message=message)
        await self._post("/api/send-message", request.model_dump(), SendError)

    async def stop_session(self, agent_instance_id: str) -> None:
        """
        Ask the backend to destroy the agent instance.

        Raises:
            InstanceTeardownError: If the backend could not delete the instance
        """
        request = StopSessionRequest(agent_instance_id=agent_instance_id)
        await self._post("/api/stop", request.model_dump(), InstanceTeardownError)
