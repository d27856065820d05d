"""
Discovery API Client

Queries the identity-authenticated x402 discovery catalog. This path is not
payment-gated: each call mints a fresh ES256 bearer token bound to the
request's method, host and path, attaches it, and sends exactly one request.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import SecretStr

from ..config import ClientSettings
from ..engine.exceptions import ConfigurationError, NetworkError, RequestFailedError, X402ClientError
from ..engine.negotiator import error_payload
from ..engine.results import NegotiationResult, PaymentFailure, PaymentSuccess, RequestAttempt
from ..signers.bearer import CdpJwtSigner
from ..signers.secrets import PrivateKeyHandle

logger = logging.getLogger(__name__)

DISCOVERY_BASE_URL = "https://api.cdp.coinbase.com"
DISCOVERY_RESOURCES_PATH = "/platform/v2/x402/discovery/resources"


class DiscoveryClient:
    """
    Client for the x402 discovery (Bazaar) resource listing.

    Args:
        key_id: CDP API key id.
        key_secret: CDP API key secret (P-256 private key, PEM or bare base64).
        signer: Pre-built token signer; replaces ``key_id``/``key_secret``.
        http: Optional client to send through; one is created and owned otherwise.
        base_url: Discovery API origin.
        timeout: Request timeout in seconds.

    A missing key pair is reported when a call is made, as a
    ``PaymentFailure`` of kind ``configuration``, before any request is sent.

    Usage:
        async with DiscoveryClient(key_id, key_secret) as discovery:
            result = await discovery.list_resources()
            ours = await discovery.find_resource("silverback")
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Union[PrivateKeyHandle, SecretStr, str, None] = None,
        *,
        signer: Optional[CdpJwtSigner] = None,
        http: Optional[httpx.AsyncClient] = None,
        base_url: str = DISCOVERY_BASE_URL,
        timeout: float = 30.0,
    ):
        self._key_id = key_id
        if key_secret is not None and not isinstance(key_secret, PrivateKeyHandle):
            key_secret = PrivateKeyHandle(key_secret, label="CDP API key secret")
        self._key_secret = key_secret
        self._signer = signer
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._base_url = httpx.URL(base_url)

    @classmethod
    def from_settings(cls, settings: ClientSettings, **kwargs) -> "DiscoveryClient":
        """Build from the ``CDP_API_KEY_ID`` / ``CDP_API_KEY_SECRET`` pair held by ``settings``."""
        kwargs.setdefault("timeout", settings.request_timeout)
        return cls(settings.cdp_api_key_id, settings.cdp_api_key_secret, **kwargs)

    @classmethod
    def from_env(cls, env_file=None, **kwargs) -> "DiscoveryClient":
        return cls.from_settings(ClientSettings.from_env(env_file), **kwargs)

    def _token_signer(self) -> CdpJwtSigner:
        if self._signer is None:
            self._signer = CdpJwtSigner(self._key_id, self._key_secret)
        return self._signer

    async def list_resources(self, type: str = "http", limit: int = 50) -> NegotiationResult:
        """
        List resources registered in the discovery catalog.

        Args:
            type: Resource type filter.
            limit: Maximum number of resources.

        Returns:
            ``PaymentSuccess`` whose JSON carries ``resources``, or a
            ``PaymentFailure`` (configuration, request_failed or network).
        """
        url = self._base_url.copy_with(path=DISCOVERY_RESOURCES_PATH)
        attempts: List[RequestAttempt] = []

        try:
            token = self._token_signer().issue_token("GET", url.host, url.path)
        except ConfigurationError as e:
            return PaymentFailure.from_error(e, attempts)

        request = self._http.build_request(
            "GET",
            url,
            params={"type": type, "limit": limit},
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
        )
        attempts.append(RequestAttempt(method="GET", url=str(request.url), attempt=1))
        logger.debug("Discovery request: GET %s", request.url)

        try:
            response = await self._send(request)
        except NetworkError as e:
            return PaymentFailure.from_error(e, attempts)

        if not response.is_success:
            error: X402ClientError = RequestFailedError(response.status_code, error_payload(response))
            logger.info("Discovery request failed with status %s", response.status_code)
            return PaymentFailure.from_error(error, attempts, response)

        return PaymentSuccess(response=response, attempts=attempts, paid=False)

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._http.send(request)
        except httpx.RequestError as e:
            raise NetworkError(f"Discovery request failed: {e!r}", attempt=1) from e

    async def find_resource(self, needle: str, type: str = "http", limit: int = 50) -> Optional[Dict[str, Any]]:
        """
        Return the first listed resource whose ``url`` contains ``needle``.

        Raises:
            X402ClientError: The listing's failure, if it failed.
        """
        body = (await self.list_resources(type=type, limit=limit)).unwrap().json()
        for resource in resources_of(body):
            if needle in str(resource.get("url") or ""):
                return resource
        return None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "DiscoveryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def resources_of(body: Any) -> List[Dict[str, Any]]:
    """Resource entries of a listing body (``resources``, or ``items`` in newer responses)."""
    if not isinstance(body, dict):
        return []
    entries = body.get("resources")
    if entries is None:
        entries = body.get("items")
    return [entry for entry in entries or [] if isinstance(entry, dict)]
