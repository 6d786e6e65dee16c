"""
Handlers for lifecycle events pushed by the RTC vendor.

The vendor notifies the backend when an agent instance starts or stops and when
the LLM produced a response. These events are recorded in the log for
observability; they never change backend state and never fail the request.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict

from rtc_agent.config.constants import (
    CALLBACK_AGENT_STARTED,
    CALLBACK_AGENT_STOPPED,
    CALLBACK_LLM_RESPONSE,
    LOGGER_NAME,
)
from rtc_agent.models.api_schemas import CallbackEvent

logger = logging.getLogger(LOGGER_NAME)

CallbackHandler = Callable[[Any], Awaitable[None]]


async def handle_agent_started(data: Any) -> None:
    logger.info(f"Agent started: {data}")


async def handle_agent_stopped(data: Any) -> None:
    logger.info(f"Agent stopped: {data}")


async def handle_llm_response(data: Any) -> None:
    logger.info(f"LLM response received: {data}")


CALLBACK_HANDLERS: Dict[str, CallbackHandler] = {
    CALLBACK_AGENT_STARTED: handle_agent_started,
    CALLBACK_AGENT_STOPPED: handle_agent_stopped,
    CALLBACK_LLM_RESPONSE: handle_llm_response,
}


async def dispatch_callback(event: CallbackEvent) -> bool:
    """
    Route a vendor callback to its handler.

    Args:
        event: The decoded callback body

    Returns:
        True if a handler exists for the event type, False otherwise
    """
    logger.debug(f"Vendor callback received: {json.dumps(event.model_dump(), default=str)}")

    handler = CALLBACK_HANDLERS.get(event.event_type or "")
    if handler is None:
        logger.warning(f"Unknown callback type: {event.event_type}")
        return False

    try:
        await handler(event.data)
    except Exception as e:
        logger.error(f"Error handling {event.event_type} callback: {e}", exc_info=True)
    return True
