"""
Agent instance lifecycle: create, message and destroy per-session instances.

Each operation is a single signed vendor action. A non-zero vendor code or a
failed request is raised as the operation's typed error carrying the vendor
message; nothing is retried here.
"""

import logging
from typing import Optional

from rtc_agent.config.constants import (
    ACTION_CREATE_AGENT_INSTANCE,
    ACTION_DELETE_AGENT_INSTANCE,
    ACTION_SEND_AGENT_INSTANCE_LLM,
    LOGGER_NAME,
)
from rtc_agent.config.settings import VendorSettings
from rtc_agent.errors import (
    InstanceCreationError,
    InstanceTeardownError,
    SendError,
    VendorRequestError,
)
from rtc_agent.models.vendor_schemas import (
    AgentInstance,
    CreateAgentInstanceRequest,
    DeleteAgentInstanceRequest,
    SendAgentInstanceLLMRequest,
)
from rtc_agent.services.agent_registry import AgentRegistry
from rtc_agent.services.signer import RequestSigner
from rtc_agent.services.vendor_client import VendorClient

logger = logging.getLogger(LOGGER_NAME)


def default_user_stream_id(user_id: str) -> str:
    return f"{user_id}_stream"


class InstanceLifecycleManager:
    """Creates, messages and destroys agent instances bound to RTC rooms."""

    def __init__(self, registry: AgentRegistry, vendor_client: VendorClient):
        self.registry = registry
        self.vendor_client = vendor_client

    async def create_instance(
        self,
        room_id: str,
        user_id: str,
        user_stream_id: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> AgentInstance:
        """
        Create an agent instance for a room/user pair.

        Args:
            room_id: RTC room the agent joins
            user_id: User the agent talks to
            user_stream_id: Stream the agent listens to, defaults to ``<user_id>_stream``
            agent_id: Registered agent id; the registry is consulted when omitted

        Returns:
            The created instance

        Raises:
            RegistrationError: If the agent template could not be registered
            InstanceCreationError: If the vendor refused to create the instance
        """
        if agent_id is None:
            agent_id = await self.registry.ensure_registered()

        request = CreateAgentInstanceRequest(
            AgentId=agent_id,
            RoomId=room_id,
            UserId=user_id,
            UserStreamId=user_stream_id or default_user_stream_id(user_id),
        )

        logger.info(f"Creating agent instance in room {room_id} for user {user_id}")
        try:
            response = await self.vendor_client.call(
                ACTION_CREATE_AGENT_INSTANCE, request.model_dump()
            )
        except VendorRequestError as e:
            raise InstanceCreationError(e.message) from e

        if not response.ok:
            raise InstanceCreationError(
                response.Message or "Failed to create agent instance", code=response.Code
            )

        instance_id = (response.Data or {}).get("AgentInstanceId")
        if not instance_id:
            raise InstanceCreationError("Vendor response did not include an agent instance id")

        logger.info(f"Agent instance created: {instance_id}")
        return AgentInstance(
            instance_id=instance_id,
            agent_id=agent_id,
            room_id=room_id,
            user_id=user_id,
            user_stream_id=request.UserStreamId,
        )

    async def send_utterance(self, agent_instance_id: str, text: str) -> None:
        """
        Deliver a user utterance to the agent instance.

        Raises:
            SendError: If the vendor did not accept the message
        """
        request = SendAgentInstanceLLMRequest(AgentInstanceId=agent_instance_id, Content=text)

        logger.info(f"Sending message to agent instance {agent_instance_id}")
        try:
            response = await self.vendor_client.call(
                ACTION_SEND_AGENT_INSTANCE_LLM, request.model_dump()
            )
        except VendorRequestError as e:
            raise SendError(e.message) from e

        if not response.ok:
            raise SendError(response.Message or "Failed to send message", code=response.Code)

    async def destroy_instance(self, agent_instance_id: str) -> None:
        """
        Delete the agent instance.

        Raises:
            InstanceTeardownError: If the vendor did not delete the instance
        """
        request = DeleteAgentInstanceRequest(AgentInstanceId=agent_instance_id)

        logger.info(f"Stopping agent instance: {agent_instance_id}")
        try:
            response = await self.vendor_client.call(
                ACTION_DELETE_AGENT_INSTANCE, request.model_dump()
            )
        except VendorRequestError as e:
            raise InstanceTeardownError(e.message) from e

        if not response.ok:
            raise InstanceTeardownError(
                response.Message or "Failed to stop agent instance", code=response.Code
            )

        logger.info(f"Agent instance stopped: {agent_instance_id}")


def build_instance_manager(settings: VendorSettings) -> InstanceLifecycleManager:
    """Compose signer, vendor client, registry and manager from settings."""
    signer = RequestSigner(settings.app_id, settings.server_secret)
    vendor_client = VendorClient(signer, settings.api_base_url)
    registry = AgentRegistry(vendor_client, settings)
    return InstanceLifecycleManager(registry, vendor_client)
