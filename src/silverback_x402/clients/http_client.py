"""
HTTP 402 Payment Client

Extends ``httpx.AsyncClient`` with an explicit ``negotiate()`` entry point
that runs the x402 send / sign / retry sequence and returns a tagged
``NegotiationResult``. Plain ``get``/``post``/``request`` keep their stock
httpx behaviour, so the client remains a drop-in ``httpx.AsyncClient``.
"""

from typing import Any, Dict, Optional, Sequence

import httpx

from ..engine.negotiator import PaymentNegotiator
from ..engine.results import NegotiationResult
from ..signers.bases import PaymentSigner
from ..signers.hub import SignerHub


class Http402Client(httpx.AsyncClient):
    """
    Extended httpx.AsyncClient with x402 payment negotiation.

    ``negotiate()``:
    1. Sends the request
    2. On 402, parses payment requirements and selects one for the configured network
    3. Signs a payment authorization through the signer hub
    4. Retries once with the ``X-PAYMENT`` header

    Fully compatible with httpx.AsyncClient - supports all methods, properties,
    and can be used as an async context manager.

    Usage:
        ```python
        hub = SignerHub(evm_private_key=key)
        async with Http402Client(hub, network="base", base_url=url) as client:
            result = await client.negotiate("GET", "/api/v1/top-pools")
            pools = result.unwrap().json()
        ```
    """

    def __init__(
        self,
        signer_hub: Optional[SignerHub] = None,
        network: str = "base",
        preferred_networks: Optional[Sequence[str]] = None,
        **kwargs
    ):
        """
        Initialize client with an optional signer hub.

        Args:
            signer_hub: Hub holding payment signers; an empty hub is created if omitted.
            network: Network whose requirements may be paid.
            preferred_networks: Optional ordered list overriding ``network`` for selection.
            **kwargs: All standard httpx.AsyncClient arguments (timeout, headers, etc.)
        """
        super().__init__(**kwargs)
        self._hub = signer_hub or SignerHub()
        self._negotiator = PaymentNegotiator(
            self,
            self._hub,
            network=network,
            preferred_networks=preferred_networks,
        )

    @property
    def signer_hub(self) -> SignerHub:
        return self._hub

    @property
    def negotiator(self) -> PaymentNegotiator:
        return self._negotiator

    def add_payment_signer(self, signer: PaymentSigner) -> None:
        """
        Register a payment signer.

        Enables the client to pay 402 responses whose requirements the
        signer supports.
        """
        self._hub.register(signer)

    async def negotiate(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> NegotiationResult:
        """
        Execute one logical call with 402 payment handling.

        Args:
            method: HTTP method (GET, POST, ...)
            url: Request URL or path relative to ``base_url``
            json: Optional JSON body
            params: Optional query parameters
            headers: Optional extra headers

        Returns:
            PaymentSuccess or PaymentFailure; never raises for server or
            payment errors.
        """
        return await self._negotiator.negotiate(
            method, url, json=json, params=params, headers=headers,
        )
