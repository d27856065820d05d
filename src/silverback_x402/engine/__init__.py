from .exceptions import (
    X402ClientError,
    ConfigurationError,
    PaymentNotConfiguredError,
    MalformedRequirementsError,
    UnsupportedNetworkError,
    PaymentRejectedError,
    RequestFailedError,
    NetworkError,
    InvalidTransition,
)
from .parser import PaymentRequirementsParser, decode_json_header, decode_settlement
from .results import (
    NegotiationState,
    NegotiationTracker,
    RequestAttempt,
    FailureKind,
    PaymentSuccess,
    PaymentFailure,
    NegotiationResult,
)
from .negotiator import PaymentNegotiator, error_payload

__all__ = [
    "X402ClientError",
    "ConfigurationError",
    "PaymentNotConfiguredError",
    "MalformedRequirementsError",
    "UnsupportedNetworkError",
    "PaymentRejectedError",
    "RequestFailedError",
    "NetworkError",
    "InvalidTransition",
    "PaymentRequirementsParser",
    "decode_json_header",
    "decode_settlement",
    "NegotiationState",
    "NegotiationTracker",
    "RequestAttempt",
    "FailureKind",
    "PaymentSuccess",
    "PaymentFailure",
    "NegotiationResult",
    "PaymentNegotiator",
    "error_payload",
]
