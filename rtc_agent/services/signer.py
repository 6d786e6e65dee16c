"""
Request signing for the RTC vendor control API.

Every control API call carries its authentication in the query string:
the action, app id, a random nonce, a timestamp and the signature version are
merged with any caller supplied query parameters, sorted by key, joined into a
canonical ``key=value&key=value`` string and signed with HMAC-SHA256 using the
server secret. The hex digest is sent as the ``Signature`` parameter.
"""

import hashlib
import hmac
import logging
import secrets
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from rtc_agent.config.constants import LOGGER_NAME, NONCE_BYTES, SIGNATURE_VERSION
from rtc_agent.errors import ConfigurationError

logger = logging.getLogger(LOGGER_NAME)


def canonical_items(params: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Return the parameters as (key, value) string pairs in lexicographic key order."""
    return [(key, str(params[key])) for key in sorted(params)]


def build_canonical_string(params: Dict[str, Any]) -> str:
    """Join the sorted parameters as ``key=value`` pairs separated by ``&``."""
    return "&".join(f"{key}={value}" for key, value in canonical_items(params))


def compute_signature(secret: str, canonical_string: str) -> str:
    """HMAC-SHA256 hex digest of the canonical string keyed with the shared secret."""
    return hmac.new(
        secret.encode("utf-8"), canonical_string.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class SignedRequest:
    """
    A fully authenticated vendor request.

    ``query`` holds the signed parameters in canonical order followed by
    ``Signature``; ``body`` is posted as JSON.
    """

    def __init__(self, action: str, query: List[Tuple[str, str]], body: Dict[str, Any]):
        self.action = action
        self.query = query
        self.body = body

    @property
    def params(self) -> Dict[str, str]:
        return dict(self.query)

    @property
    def signature(self) -> str:
        return self.params["Signature"]

    def query_string(self) -> str:
        return "&".join(f"{key}={quote(value, safe='')}" for key, value in self.query)

    def url(self, base_url: str) -> str:
        return f"{base_url}?{self.query_string()}"


class RequestSigner:
    """Builds signed requests for a single vendor application."""

    def __init__(
        self,
        app_id: str,
        server_secret: str,
        clock: Callable[[], float] = time.time,
        nonce_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the signer.

        Args:
            app_id: Vendor application id
            server_secret: Shared secret used as the HMAC key
            clock: Source of the current epoch time in seconds
            nonce_factory: Source of per-request nonces, defaults to a
                cryptographically random 16 byte hex token

        Raises:
            ConfigurationError: If the app id or the secret is missing
        """
        if not app_id:
            raise ConfigurationError("RTC app id is not configured")
        if not server_secret:
            raise ConfigurationError("RTC server secret is not configured")

        self.app_id = app_id
        self._server_secret = server_secret
        self._clock = clock
        self._nonce_factory = nonce_factory or (lambda: secrets.token_hex(NONCE_BYTES))

    def sign(
        self,
        action: str,
        body: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        """
        Sign a vendor action.

        Args:
            action: Vendor action name, e.g. ``CreateAgentInstance``
            body: JSON body of the request (not part of the signature)
            query_params: Extra query parameters to sign and transmit

        Returns:
            The signed request descriptor
        """
        params: Dict[str, Any] = dict(query_params or {})
        params.update(
            {
                "Action": action,
                "AppId": self.app_id,
                "SignatureNonce": self._nonce_factory(),
                "Timestamp": int(self._clock()),
                "SignatureVersion": SIGNATURE_VERSION,
            }
        )

        query = canonical_items(params)
        canonical_string = "&".join(f"{key}={value}" for key, value in query)
        query.append(("Signature", compute_signature(self._server_secret, canonical_string)))

        logger.debug(f"Signed {action} request with keys: {[key for key, _ in query]}")
        return SignedRequest(action, query, dict(body or {}))
