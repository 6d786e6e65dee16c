"""
Process-wide registration of the agent template.

The vendor needs the agent template (LLM endpoint, speech vendors, generation
parameters) registered once before any instance can be created. The registry
performs that registration on first use and caches the agent id for the rest
of the process. Concurrent first callers are serialized on an asyncio lock so
exactly one registration request reaches the vendor.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from rtc_agent.config.constants import ACTION_REGISTER_AGENT, LOGGER_NAME
from rtc_agent.config.settings import VendorSettings
from rtc_agent.errors import RegistrationError, VendorRequestError
from rtc_agent.models.vendor_schemas import AgentTemplate, LLMConfig
from rtc_agent.services.vendor_client import VendorClient

logger = logging.getLogger(LOGGER_NAME)


def generate_agent_id() -> str:
    """Timestamp derived agent id, e.g. ``agent_1718000000000``."""
    return f"agent_{int(time.time() * 1000)}"


def build_agent_template(agent_id: str, settings: VendorSettings) -> AgentTemplate:
    """Build the agent template registered with the vendor."""
    return AgentTemplate(
        AgentId=agent_id,
        LLM=LLMConfig(
            Url=settings.llm_url,
            ApiKey=settings.llm_api_key,
            Model=settings.llm_model,
            SystemPrompt=settings.system_prompt,
        ),
    )


class AgentRegistry:
    """Registers the agent template once and remembers its id."""

    def __init__(
        self,
        vendor_client: VendorClient,
        settings: VendorSettings,
        id_factory: Callable[[], str] = generate_agent_id,
    ):
        self.vendor_client = vendor_client
        self.settings = settings
        self._id_factory = id_factory
        self._agent_id: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def registered_agent_id(self) -> Optional[str]:
        return self._agent_id

    @property
    def is_registered(self) -> bool:
        return self._agent_id is not None

    async def ensure_registered(self) -> str:
        """
        Return the registered agent id, registering the template on first use.

        Returns:
            The agent id accepted by the vendor

        Raises:
            RegistrationError: If the vendor rejected the template or could not be
                reached. Nothing is cached, so a later call retries.
        """
        if self._agent_id is not None:
            return self._agent_id

        async with self._lock:
            # Another caller may have registered while we waited for the lock
            if self._agent_id is not None:
                return self._agent_id

            agent_id = self._id_factory()
            template = build_agent_template(agent_id, self.settings)

            logger.info(f"Registering agent {agent_id} with the vendor")
            try:
                response = await self.vendor_client.call(
                    ACTION_REGISTER_AGENT, template.model_dump()
                )
            except VendorRequestError as e:
                raise RegistrationError(f"Failed to register agent: {e.message}") from e

            if not response.ok:
                logger.error(f"Agent registration rejected: {response.Message}")
                raise RegistrationError(
                    f"Failed to register agent: {response.Message}", code=response.Code
                )

            self._agent_id = agent_id
            logger.info(f"Agent registered successfully: {agent_id}")
            return agent_id
