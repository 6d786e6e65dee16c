"""
WebSocket room transport.

Joins an RTC room through a room gateway that relays room messages as JSON
text frames. Each decoded frame is dispatched to the transport's subscribers.
"""

import asyncio
import json
import logging
from typing import Optional
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from rtc_agent.client.capabilities import RoomTransport
from rtc_agent.config.constants import LOGGER_NAME
from rtc_agent.errors import TransportError

logger = logging.getLogger(LOGGER_NAME)

CONNECTION_TIMEOUT = 30  # seconds


class WebSocketRoomTransport(RoomTransport):
    """Room transport over a single WebSocket connection to the room gateway."""

    def __init__(self, gateway_url: str):
        super().__init__()
        self.gateway_url = gateway_url
        self.websocket = None
        self.room_id: Optional[str] = None
        self._recv_task: Optional[asyncio.Task] = None

    async def join(self, room_id: str, user_id: str) -> None:
        if self.websocket is not None:
            raise TransportError(f"Already joined room {self.room_id}")

        url = f"{self.gateway_url}?{urlencode({'room_id': room_id, 'user_id': user_id})}"
        try:
            self.websocket = await asyncio.wait_for(
                websockets.connect(url), timeout=CONNECTION_TIMEOUT
            )
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.error(f"Failed to join room {room_id}: {e}")
            raise TransportError(f"Failed to join room {room_id}: {e}") from e

        self.room_id = room_id
        self._recv_task = asyncio.create_task(self._recv_loop())
        logger.info(f"Joined room {room_id} as {user_id}")

    async def leave(self) -> None:
        recv_task, self._recv_task = self._recv_task, None
        if recv_task is not None:
            if not recv_task.done():
                recv_task.cancel()
            try:
                await recv_task
            except asyncio.CancelledError:
                logger.debug("Room receive task cancelled")
            except Exception as e:
                logger.error(f"Room receive task failed: {e}")

        websocket, self.websocket = self.websocket, None
        room_id, self.room_id = self.room_id, None
        if websocket is None:
            return

        try:
            await websocket.close()
        except (OSError, WebSocketException) as e:
            raise TransportError(f"Failed to leave room {room_id}: {e}") from e
        logger.info(f"Left room {room_id}")

    async def _recv_loop(self) -> None:
        try:
            async for raw in self.websocket:
                try:
                    data = json.loads(raw)
                except ValueError:
                    logger.warning(f"Ignoring non-JSON room frame: {raw!r:.80}")
                    continue

                if isinstance(data, dict):
                    await self.dispatch(data)
        except ConnectionClosed as e:
            logger.warning(f"Room connection closed: {e}")
