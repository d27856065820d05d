"""
Payment Negotiator - the two-phase request state machine

Orchestrates one logical call against a payment-gated HTTP API:

1. Send the request unmodified (attempt 1)
2. On success, return the response untouched without signing anything
3. On 402, parse the requirements, pick exactly one for the configured
   network and have the signer hub authorize it
4. Re-send the identical request with the ``X-PAYMENT`` header (attempt 2)
5. A second 402 is terminal: no third request is ever sent

Every outcome is returned as a ``NegotiationResult``; errors are never
swallowed and never raised past ``negotiate()`` except cancellation and
internal state machine violations.

Example:
    negotiator = PaymentNegotiator(http, hub, network="base")
    result = await negotiator.negotiate("POST", "/api/v1/swap-quote", json=body)
    if result.ok:
        data = result.json()
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import httpx

from ..schemas.https import PAYMENT_HEADER, PAYMENT_REQUIRED_STATUS, PaymentRequirement
from ..schemas.networks import canonical_network
from .exceptions import (
    MalformedRequirementsError,
    NetworkError,
    PaymentNotConfiguredError,
    PaymentRejectedError,
    RequestFailedError,
    UnsupportedNetworkError,
    X402ClientError,
)
from .parser import PaymentRequirementsParser, decode_settlement
from .results import (
    NegotiationResult,
    NegotiationState,
    NegotiationTracker,
    PaymentFailure,
    PaymentSuccess,
    RequestAttempt,
)

if TYPE_CHECKING:
    from ..signers.hub import SignerHub

logger = logging.getLogger(__name__)


def error_payload(response: httpx.Response) -> Any:
    """Server error payload: parsed JSON when possible, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


def request_path(url: httpx.URL) -> str:
    """Path exactly as sent on the wire: still percent-encoded, query dropped."""
    return url.raw_path.split(b"?", 1)[0].decode("ascii")


def _same_network(left: str, right: str) -> bool:
    return canonical_network(left) == canonical_network(right)


class PaymentNegotiator:
    """
    Stateless driver of the send / 402 / sign / retry sequence.

    The negotiator holds no per-call state: every ``negotiate()`` call builds
    its own tracker and attempt list, so one instance can serve any number
    of concurrent calls. The only shared resource is the read-only signer hub.

    Args:
        http: Client used for both attempts. Base URL, default headers and
            transport come from it.
        hub: Signer hub holding the payment credential; None means payment
            is not configured and every 402 ends in ``PaymentNotConfiguredError``.
        network: Configured network; a requirement on any other network is
            never signed.
        preferred_networks: Optional ordered list of acceptable networks,
            replacing ``network`` for selection when given.
        timeout: Per-attempt timeout in seconds; None keeps the client's own.
        parser: Requirements parser, replaceable for tests.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        hub: Optional["SignerHub"] = None,
        network: str = "base",
        preferred_networks: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        parser: Optional[PaymentRequirementsParser] = None,
    ):
        self._http = http
        self._hub = hub
        self.network = network
        self.preferred_networks: List[str] = list(preferred_networks or [])
        self._timeout = timeout
        self._parser = parser or PaymentRequirementsParser()

    @property
    def acceptable_networks(self) -> List[str]:
        """Networks a requirement may be selected from, in preference order."""
        return self.preferred_networks or [self.network]

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
        Run one logical call.

        Args:
            method: HTTP method.
            url: Absolute URL or path relative to the client's base URL.
            json: JSON body, sent identically on both attempts.
            params: Query parameters, sent identically on both attempts.
            headers: Extra request headers.

        Returns:
            ``PaymentSuccess`` or ``PaymentFailure``.
        """
        tracker = NegotiationTracker()
        attempts: List[RequestAttempt] = []
        method = method.upper()

        request = self._build_request(method, url, json=json, params=params, headers=headers)
        resource = request_path(request.url)

        # ---------------- attempt 1 ----------------
        tracker.advance(NegotiationState.SENT_FIRST)
        attempts.append(RequestAttempt(method=method, url=str(request.url), body=json, attempt=1))
        try:
            response = await self._send(request, attempt=1)
        except NetworkError as e:
            return self._fail(tracker, e, attempts)

        if response.is_success:
            tracker.advance(NegotiationState.SUCCESS)
            return PaymentSuccess(response=response, attempts=attempts, paid=False)

        if response.status_code != PAYMENT_REQUIRED_STATUS:
            return self._fail(tracker, self._request_failed(response), attempts, response)

        # ---------------- payment required ----------------
        tracker.advance(NegotiationState.PAYMENT_REQUIRED)
        logger.info("Payment required for %s %s", method, resource)

        try:
            requirements = self._parser.parse(response)
            if self._hub is None or not self._hub.configured:
                raise PaymentNotConfiguredError(
                    f"{method} {resource} requires payment but no wallet private key is configured"
                )
            requirement = self._select(requirements)
            self._check_resource(requirement, resource)

            tracker.advance(NegotiationState.AUTHORIZING)
            authorization = self._hub.signature(requirement, resource)
        except X402ClientError as e:
            return self._fail(tracker, e, attempts, response)

        # ---------------- attempt 2 ----------------
        paid_headers = httpx.Headers(headers)
        paid_headers[PAYMENT_HEADER] = authorization.to_header_value()
        paid_request = self._build_request(method, url, json=json, params=params, headers=paid_headers)

        tracker.advance(NegotiationState.SENT_PAID)
        attempts.append(RequestAttempt(
            method=method, url=str(paid_request.url), body=json, attempt=2, paid=True,
        ))
        try:
            paid_response = await self._send(paid_request, attempt=2)
        except NetworkError as e:
            return self._fail(tracker, e, attempts)

        if paid_response.is_success:
            tracker.advance(NegotiationState.SUCCESS)
            logger.info(
                "Paid %s on %s for %s %s (status %s)",
                authorization.amount, authorization.network, method, resource,
                paid_response.status_code,
            )
            return PaymentSuccess(
                response=paid_response,
                attempts=attempts,
                paid=True,
                payment_response=decode_settlement(paid_response),
            )

        if paid_response.status_code == PAYMENT_REQUIRED_STATUS:
            logger.warning(
                "Payment of %s on %s rejected for %s %s",
                authorization.amount, authorization.network, method, resource,
            )
            error = PaymentRejectedError(
                f"{method} {resource} still requires payment after a signed authorization was sent"
            )
            return self._fail(tracker, error, attempts, paid_response)

        return self._fail(tracker, self._request_failed(paid_response), attempts, paid_response)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _build_request(self, method: str, url: str, **kwargs) -> httpx.Request:
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        return self._http.build_request(method, url, **kwargs)

    async def _send(self, request: httpx.Request, attempt: int) -> httpx.Response:
        """Send one attempt. Request failures become ``NetworkError``; cancellation propagates."""
        logger.debug("Attempt %d: %s %s", attempt, request.method, request.url)
        try:
            return await self._http.send(request)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Attempt {attempt} timed out: {e!r}", attempt) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Attempt {attempt} failed: {e!r}", attempt) from e

    def _select(self, requirements: List[PaymentRequirement]) -> PaymentRequirement:
        """
        Pick exactly one requirement.

        Raises:
            MalformedRequirementsError: If the server offered no requirement.
            UnsupportedNetworkError: If no offered requirement is on an acceptable
                network with a scheme a registered signer supports.
        """
        if not requirements:
            raise MalformedRequirementsError("Server offered an empty list of payment requirements")

        for network in self.acceptable_networks:
            for requirement in requirements:
                if _same_network(requirement.network, network) and self._hub.signer_for(requirement):
                    return requirement

        offered = ", ".join(f"{r.scheme}/{r.network}" for r in requirements)
        raise UnsupportedNetworkError(
            f"No payment requirement matches configured network(s) "
            f"{', '.join(self.acceptable_networks)}; server offered: {offered}"
        )

    @staticmethod
    def _check_resource(requirement: PaymentRequirement, resource: str) -> None:
        declared = requirement.resource_path
        if declared is not None and declared != resource:
            raise MalformedRequirementsError(
                f"Payment requirement targets {declared!r}, request was for {resource!r}"
            )

    @staticmethod
    def _request_failed(response: httpx.Response) -> RequestFailedError:
        return RequestFailedError(response.status_code, error_payload(response))

    @staticmethod
    def _fail(
        tracker: NegotiationTracker,
        error: X402ClientError,
        attempts: List[RequestAttempt],
        response: Optional[httpx.Response] = None,
    ) -> PaymentFailure:
        tracker.advance(NegotiationState.FAILED)
        logger.debug("Negotiation failed after %d attempt(s): %s", len(attempts), error)
        return PaymentFailure.from_error(error, attempts, response)
