"""
Negotiation states and tagged results.

A logical call moves through a small, fixed state machine and always ends in
exactly one ``NegotiationResult``: a ``PaymentSuccess`` or a
``PaymentFailure`` carrying a ``FailureKind``. Callers branch on the kind
instead of matching error strings.

State machine:
    IDLE -> SENT_FIRST -> SUCCESS
                       -> PAYMENT_REQUIRED -> AUTHORIZING -> SENT_PAID -> SUCCESS
                                                                       -> FAILED
    Any non-terminal state may move to FAILED.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict

from ..schemas.https import SettlementResponse
from .exceptions import (
    ConfigurationError,
    InvalidTransition,
    MalformedRequirementsError,
    NetworkError,
    PaymentNotConfiguredError,
    PaymentRejectedError,
    RequestFailedError,
    UnsupportedNetworkError,
    X402ClientError,
)


class NegotiationState(str, Enum):
    IDLE = "idle"
    SENT_FIRST = "sent_first"
    PAYMENT_REQUIRED = "payment_required"
    AUTHORIZING = "authorizing"
    SENT_PAID = "sent_paid"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (NegotiationState.SUCCESS, NegotiationState.FAILED)


_TRANSITIONS: Dict[NegotiationState, FrozenSet[NegotiationState]] = {
    NegotiationState.IDLE: frozenset({NegotiationState.SENT_FIRST}),
    NegotiationState.SENT_FIRST: frozenset({
        NegotiationState.SUCCESS,
        NegotiationState.PAYMENT_REQUIRED,
        NegotiationState.FAILED,
    }),
    NegotiationState.PAYMENT_REQUIRED: frozenset({
        NegotiationState.AUTHORIZING,
        NegotiationState.FAILED,
    }),
    NegotiationState.AUTHORIZING: frozenset({
        NegotiationState.SENT_PAID,
        NegotiationState.FAILED,
    }),
    NegotiationState.SENT_PAID: frozenset({
        NegotiationState.SUCCESS,
        NegotiationState.FAILED,
    }),
    NegotiationState.SUCCESS: frozenset(),
    NegotiationState.FAILED: frozenset(),
}


class NegotiationTracker:
    """
    Per-call state holder enforcing the legal transitions.

    Created fresh for every logical call; never shared between calls.
    """

    def __init__(self):
        self.state = NegotiationState.IDLE
        self.history: List[NegotiationState] = [NegotiationState.IDLE]

    def advance(self, target: NegotiationState) -> None:
        """
        Move to ``target``.

        Raises:
            InvalidTransition: If ``target`` is not reachable from the current state.
        """
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(self.state, target)
        self.state = target
        self.history.append(target)


@dataclass(frozen=True)
class RequestAttempt:
    """One network operation of a logical call. ``attempt`` is 1 or 2."""
    method: str
    url: str
    body: Any = None
    attempt: int = 1
    paid: bool = False

    def __post_init__(self):
        if self.attempt not in (1, 2):
            raise ValueError(f"attempt must be 1 or 2, got {self.attempt}")


class FailureKind(str, Enum):
    PAYMENT_NOT_CONFIGURED = "payment_not_configured"
    CONFIGURATION = "configuration"
    MALFORMED_REQUIREMENTS = "malformed_requirements"
    UNSUPPORTED_NETWORK = "unsupported_network"
    PAYMENT_REJECTED = "payment_rejected"
    REQUEST_FAILED = "request_failed"
    NETWORK = "network"

    @classmethod
    def for_error(cls, error: X402ClientError) -> "FailureKind":
        """Map an error to its kind; subclasses are checked before their bases."""
        for error_type, kind in _KIND_BY_ERROR:
            if isinstance(error, error_type):
                return kind
        raise TypeError(f"No failure kind for {type(error).__name__}")


_KIND_BY_ERROR = (
    (PaymentNotConfiguredError, FailureKind.PAYMENT_NOT_CONFIGURED),
    (ConfigurationError, FailureKind.CONFIGURATION),
    (MalformedRequirementsError, FailureKind.MALFORMED_REQUIREMENTS),
    (UnsupportedNetworkError, FailureKind.UNSUPPORTED_NETWORK),
    (PaymentRejectedError, FailureKind.PAYMENT_REJECTED),
    (RequestFailedError, FailureKind.REQUEST_FAILED),
    (NetworkError, FailureKind.NETWORK),
)


class PaymentSuccess(BaseModel):
    """
    Terminal success of a logical call.

    Attributes:
        response: Final server response, untouched.
        attempts: Attempts made (one, or two when a payment was sent).
        paid: True when the response was obtained with a payment authorization.
        payment_response: Decoded settlement receipt, if the server returned one.
    """
    response: httpx.Response
    attempts: List[RequestAttempt]
    paid: bool = False
    payment_response: Optional[SettlementResponse] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    ok: ClassVar[bool] = True

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def content(self) -> bytes:
        return self.response.content

    def json(self) -> Any:
        return self.response.json()

    def unwrap(self) -> httpx.Response:
        return self.response

    def __repr__(self) -> str:
        return (
            f"PaymentSuccess(status={self.response.status_code}, "
            f"attempts={len(self.attempts)}, paid={self.paid})"
        )


class PaymentFailure(BaseModel):
    """
    Terminal failure of a logical call.

    Attributes:
        kind: Discriminant for branching.
        error: The error describing the failure.
        attempts: Attempts made before the failure.
        response: Last server response, if any was received.
    """
    kind: FailureKind
    error: X402ClientError
    attempts: List[RequestAttempt]
    response: Optional[httpx.Response] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    ok: ClassVar[bool] = False

    @classmethod
    def from_error(
        cls,
        error: X402ClientError,
        attempts: List[RequestAttempt],
        response: Optional[httpx.Response] = None,
    ) -> "PaymentFailure":
        return cls(
            kind=FailureKind.for_error(error),
            error=error,
            attempts=list(attempts),
            response=response,
        )

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    def unwrap(self) -> httpx.Response:
        """Raise the carried error."""
        raise self.error

    def __repr__(self) -> str:
        return (
            f"PaymentFailure(kind={self.kind.value}, "
            f"attempts={len(self.attempts)}, error={self.error})"
        )


NegotiationResult = Union[PaymentSuccess, PaymentFailure]
