"""
Exception and Error Definitions Module

Defines the error taxonomy for the payment negotiation flow. Every error a
logical call can end with is one of these types, and each maps to exactly
one ``FailureKind`` on the tagged result, so callers never need to match on
message strings.

Exception Hierarchy:
    X402ClientError (root)
    ├── ConfigurationError
    │   └── PaymentNotConfiguredError
    ├── MalformedRequirementsError
    ├── UnsupportedNetworkError
    ├── PaymentRejectedError
    ├── RequestFailedError
    ├── NetworkError
    └── InvalidTransition
"""

from typing import Any, Optional


class X402ClientError(Exception):
    """
    Root exception class for all client-side payment errors.

    All custom exceptions inherit from this class to enable unified
    exception handling by callers of ``NegotiationResult.unwrap()``.
    """
    pass


class ConfigurationError(X402ClientError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - No credential configured where one is required
    - Discovery API key id / secret pair absent
    - Unknown network name or invalid timeout in settings
    - Key material that cannot be loaded

    Never retried; surfaced to the caller immediately.
    """
    pass


class PaymentNotConfiguredError(ConfigurationError):
    """
    Raised when a resource demands payment but no payment signer is configured.

    Distinguished from the generic ``ConfigurationError`` so callers can tell
    "this endpoint is paid and you have no wallet" apart from other setup
    problems. No signing is attempted and no second request is sent.
    """
    pass


class MalformedRequirementsError(X402ClientError):
    """
    Raised when the server's payment terms cannot be parsed.

    This includes scenarios such as:
    - Neither a requirements header nor a requirements body is present
    - A requirement lacks scheme, network, payTo or maxAmountRequired
    - maxAmountRequired is not a non-negative integer string
    - The requirement targets a different resource than the request
    """
    pass


class UnsupportedNetworkError(X402ClientError):
    """
    Raised when no offered requirement matches the configured network.

    The negotiator never guesses a network: if nothing on offer can be
    signed for the configured network (and scheme), the call fails before
    any signing takes place.
    """
    pass


class PaymentRejectedError(X402ClientError):
    """
    Raised when the paid retry is answered with payment-required again.

    Bounds the cost of a logical call to one signed authorization: the
    negotiator never sends a third request.
    """
    pass


class RequestFailedError(X402ClientError):
    """
    Raised for any non-success status other than payment-required.

    Attributes:
        status_code: HTTP status returned by the server
        payload: Server error payload (parsed JSON when possible, raw text otherwise)
    """

    def __init__(self, status_code: int, payload: Any = None, message: Optional[str] = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(message or f"Request failed with status {status_code}")


class NetworkError(X402ClientError):
    """
    Raised when an attempt fails at the transport level.

    This includes scenarios such as:
    - Per-attempt timeout
    - Connection refused or reset
    - TLS or protocol errors

    A network error on the first attempt never triggers the paid retry.

    Attributes:
        attempt: Attempt number (1 or 2) on which the transport failed
    """

    def __init__(self, message: str, attempt: int):
        self.attempt = attempt
        super().__init__(message)


class InvalidTransition(X402ClientError):
    """
    Raised when the negotiation state machine is asked for an illegal move.

    This indicates a programming error inside the negotiator rather than
    a server or configuration problem.

    Attributes:
        current_state: State the negotiation was in
        target_state: State that was requested
    """

    def __init__(self, current_state: Any, target_state: Any):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(f"Illegal transition {current_state} -> {target_state}")
