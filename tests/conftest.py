import logging

import pytest

from rtc_agent.client.capabilities import RoomTransport
from rtc_agent.config.settings import VendorSettings


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture
def vendor_settings():
    """Vendor settings with test credentials"""
    return VendorSettings(
        app_id="1234567",
        server_secret="test-server-secret",
        api_base_url="https://rtc-api.example.com/",
        llm_url="https://llm.example.com/v1/chat/completions",
        llm_api_key="test-llm-key",
        llm_model="test-model",
    )


class FakeRoomTransport(RoomTransport):
    """Room transport recording joins/leaves; tests push room messages with dispatch()"""

    def __init__(self):
        super().__init__()
        self.room_id = None
        self.joins = []
        self.leave_count = 0
        self.join_error = None
        self.leave_error = None

    async def join(self, room_id, user_id):
        self.joins.append((room_id, user_id))
        if self.join_error is not None:
            raise self.join_error
        self.room_id = room_id

    async def leave(self):
        self.leave_count += 1
        if self.leave_error is not None:
            raise self.leave_error
        self.room_id = None


@pytest.fixture
def fake_transport():
    return FakeRoomTransport()
