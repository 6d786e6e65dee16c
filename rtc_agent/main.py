"""
FastAPI backend proxy between the chat client and the RTC vendor control API.

The client never holds vendor credentials. It asks this server to start an agent
instance bound to its RTC room, to forward user utterances, and to stop the
instance when the conversation ends. The server signs every vendor call,
registers the agent template on first use, and receives the vendor's
asynchronous lifecycle callbacks.

Every vendor failure, and every malformed request body, is answered with
``500 {"error": message}``; raw exceptions never reach the client.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from rtc_agent.config.logging_config import configure_logging
from rtc_agent.config.settings import VendorSettings
from rtc_agent.errors import VendorError
from rtc_agent.handlers.callback_handlers import dispatch_callback
from rtc_agent.models.api_schemas import (
    CallbackEvent,
    ErrorResponse,
    HealthResponse,
    SendMessageRequest,
    StartSessionRequest,
    StartSessionResponse,
    StopSessionRequest,
    SuccessResponse,
)
from rtc_agent.services.instance_manager import (
    InstanceLifecycleManager,
    build_instance_manager,
)

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

# Configure logging
logger = configure_logging()

# Get configuration from environment variables
PORT = int(os.getenv("PORT", "8080"))
HOST = os.getenv("HOST", "0.0.0.0")

APP_NAME = "RTC Agent Proxy"
APP_DESCRIPTION = "Signed-request proxy that provisions hosted conversational AI agents in RTC rooms"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the instance manager from the environment unless one was injected."""
    if app.state.instance_manager is None:
        app.state.instance_manager = build_instance_manager(VendorSettings.from_env())
        logger.info("Agent service initialized")
    yield


app = FastAPI(
    title=APP_NAME,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
)

# Built by the lifespan hook at startup unless already set; missing credentials
# abort startup with ConfigurationError
app.state.instance_manager = None


def get_instance_manager(request: Request) -> Optional[InstanceLifecycleManager]:
    return request.app.state.instance_manager


def error_response(error: Exception) -> JSONResponse:
    message = error.message if isinstance(error, VendorError) else str(error)
    body = ErrorResponse(error=message or "Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies with the same error payload as vendor failures."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"Invalid request to {request.url.path}: {details}")
    body = ErrorResponse(error=f"Invalid request: {details}")
    return JSONResponse(status_code=500, content=body.model_dump())


def require_manager(manager: Optional[InstanceLifecycleManager]) -> InstanceLifecycleManager:
    if manager is None:
        raise RuntimeError("Agent service is not initialized")
    return manager


@app.post("/api/start", response_model=StartSessionResponse)
async def start_session(
    body: StartSessionRequest,
    manager: Optional[InstanceLifecycleManager] = Depends(get_instance_manager),
):
    """Register the agent if needed and create an instance bound to the caller's room."""
    try:
        instance = await require_manager(manager).create_instance(
            body.room_id, body.user_id, body.user_stream_id
        )
    except Exception as e:
        logger.error(f"Start session error: {e}")
        return error_response(e)

    return StartSessionResponse(
        success=True, agentInstanceId=instance.instance_id, agentId=instance.agent_id
    )


@app.post("/api/send-message", response_model=SuccessResponse)
async def send_message(
    body: SendMessageRequest,
    manager: Optional[InstanceLifecycleManager] = Depends(get_instance_manager),
):
    """Forward a user utterance to the agent instance."""
    try:
        await require_manager(manager).send_utterance(body.agent_instance_id, body.message)
    except Exception as e:
        logger.error(f"Send message error: {e}")
        return error_response(e)

    return SuccessResponse()


@app.post("/api/stop", response_model=SuccessResponse)
async def stop_session(
    body: StopSessionRequest,
    manager: Optional[InstanceLifecycleManager] = Depends(get_instance_manager),
):
    """Delete the agent instance."""
    try:
        await require_manager(manager).destroy_instance(body.agent_instance_id)
    except Exception as e:
        logger.error(f"Stop session error: {e}")
        return error_response(e)

    return SuccessResponse()


@app.post("/api/callbacks", response_model=SuccessResponse)
async def vendor_callbacks(request: Request):
    """Ingress for vendor lifecycle events. Always acknowledges."""
    try:
        payload = await request.json()
        event = CallbackEvent(**payload) if isinstance(payload, dict) else CallbackEvent()
    except (ValueError, ValidationError) as e:
        logger.warning(f"Malformed vendor callback: {e}")
        event = CallbackEvent()

    await dispatch_callback(event)
    return SuccessResponse()


@app.get("/health", response_model=HealthResponse)
async def health_check(
    manager: Optional[InstanceLifecycleManager] = Depends(get_instance_manager),
):
    """Health check endpoint reporting whether the agent template is registered."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        registeredAgent=bool(manager and manager.registry.is_registered),
    )


@app.get("/")
async def root():
    """Basic information about the API."""
    return {
        "name": APP_NAME,
        "description": APP_DESCRIPTION,
        "version": APP_VERSION,
        "endpoints": {
            "/api/start": "Create an agent instance for a room",
            "/api/send-message": "Send a user message to the agent instance",
            "/api/stop": "Delete the agent instance",
            "/api/callbacks": "Vendor lifecycle callbacks",
            "/health": "Health check endpoint",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on http://{HOST}:{PORT}")
    logger.info(f"Health check: http://{HOST}:{PORT}/health")
    logger.info(f"Callbacks URL: http://{HOST}:{PORT}/api/callbacks")
    uvicorn.run(app, host=HOST, port=PORT, http="h11")
