from .bases import CanonicalModel, ClaimSet, MAX_CLAIM_WINDOW_SECONDS
from .https import (
    PaymentRequirement,
    TransferAuthorization,
    ExactEvmPayload,
    PaymentAuthorization,
    SettlementResponse,
    encode_header_json,
    PAYMENT_REQUIRED_STATUS,
    REQUIREMENTS_HEADERS,
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
)
from .versions import X402Version, CURRENT_VERSION

__all__ = [
    "CanonicalModel",
    "ClaimSet",
    "MAX_CLAIM_WINDOW_SECONDS",
    "PaymentRequirement",
    "TransferAuthorization",
    "ExactEvmPayload",
    "PaymentAuthorization",
    "SettlementResponse",
    "encode_header_json",
    "PAYMENT_REQUIRED_STATUS",
    "REQUIREMENTS_HEADERS",
    "PAYMENT_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "X402Version",
    "CURRENT_VERSION",
]
