"""
HTTP client for the RTC vendor control API.

Each call is signed with :class:`RequestSigner` and posted with ``requests`` on a
worker thread so the event loop keeps serving other requests. Transport, HTTP
and decoding failures are raised as :class:`VendorRequestError`; a well formed
envelope is returned as-is, including non-zero vendor codes, so callers decide
which typed error to raise.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from rtc_agent.config.constants import LOGGER_NAME, VENDOR_REQUEST_TIMEOUT
from rtc_agent.errors import VendorRequestError
from rtc_agent.models.vendor_schemas import VendorResponse
from rtc_agent.services.signer import RequestSigner

logger = logging.getLogger(LOGGER_NAME)


class VendorClient:
    """Posts signed actions to the vendor control API."""

    def __init__(
        self,
        signer: RequestSigner,
        api_base_url: str,
        timeout: float = VENDOR_REQUEST_TIMEOUT,
    ):
        self.signer = signer
        self.api_base_url = api_base_url
        self.timeout = timeout

    async def call(self, action: str, body: Optional[Dict[str, Any]] = None) -> VendorResponse:
        """
        Sign and post a vendor action.

        Args:
            action: Vendor action name
            body: JSON body of the action

        Returns:
            The decoded response envelope

        Raises:
            VendorRequestError: If no valid envelope could be obtained
        """
        request = self.signer.sign(action, body)

        try:
            response = await asyncio.to_thread(
                requests.post,
                request.url(self.api_base_url),
                json=request.body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Vendor request {action} failed: {e}")
            raise VendorRequestError(f"{action} request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(
                f"Vendor request {action} returned a non-JSON body "
                f"(HTTP {response.status_code})"
            )
            raise VendorRequestError(
                f"{action} returned an invalid response (HTTP {response.status_code})"
            ) from e

        try:
            envelope = VendorResponse(**payload)
        except (TypeError, ValidationError) as e:
            logger.error(f"Vendor request {action} returned an unexpected envelope: {payload}")
            raise VendorRequestError(f"{action} returned an unexpected response") from e

        if envelope.ok:
            logger.debug(f"Vendor request {action} succeeded")
        else:
            logger.warning(
                f"Vendor request {action} rejected with code {envelope.Code}: {envelope.Message}"
            )
        return envelope
