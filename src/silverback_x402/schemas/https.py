"""
HTTP Request/Response Schema Models for the x402 Payment Protocol

This module defines the Pydantic models exchanged with a payment-gated
server. They cover both halves of the two-phase request:

1. Server answers 402 with one or more payment requirements
2. Client retries with a signed payment authorization in ``X-PAYMENT``
3. Server answers the paid retry, optionally with a settlement receipt
   in ``X-PAYMENT-RESPONSE``

Wire names are camelCase; Python attributes are snake_case with aliases.
"""

import base64
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import ConfigDict, Field, field_validator

from .bases import CanonicalModel
from .versions import CURRENT_VERSION

PAYMENT_REQUIRED_STATUS = 402

#: Response headers that may carry payment requirements, checked in order.
REQUIREMENTS_HEADERS = ("PAYMENT-REQUIRED", "X-PAYMENT")
#: Request header carrying the signed authorization on the paid retry.
PAYMENT_HEADER = "X-PAYMENT"
#: Response header carrying the settlement receipt of a paid request.
PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"

_ATOMIC_AMOUNT = re.compile(r"^[0-9]+$")


def encode_header_json(model: CanonicalModel) -> str:
    """Base64-encode the canonical JSON form of ``model`` for use as a header value."""
    return base64.b64encode(model.to_canonical_json().encode("utf-8")).decode("ascii")


# ============================================================================
# Step 1: Server's 402 Payment Required Response
# ============================================================================

class PaymentRequirement(CanonicalModel):
    """One set of terms under which the server will serve a gated resource.

    Immutable once parsed. Unknown wire fields are preserved so that they
    can be echoed back to the server untouched in the authorization.

    Attributes:
        scheme: Payment scheme identifier (e.g. "exact").
        network: Network name (e.g. "base", "base-sepolia").
        max_amount_required: Amount in the asset's atomic units, as a decimal string.
        pay_to: Recipient address.
        asset: Asset (token contract) identifier.
        resource: Resource URL or path the terms apply to.
        description: Optional human-readable resource description.
        mime_type: Optional response MIME type.
        max_timeout_seconds: Longest validity the server accepts for an authorization.
        output_schema: Optional response schema advertised by the server.
        extra: Scheme-specific fields (for "exact" EVM: EIP-712 domain name/version).
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    scheme: str = Field(..., min_length=1)
    network: str = Field(..., min_length=1)
    max_amount_required: str = Field(..., alias="maxAmountRequired")
    pay_to: str = Field(..., min_length=1, alias="payTo")
    asset: Optional[str] = None
    resource: Optional[str] = None
    description: Optional[str] = None
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    max_timeout_seconds: Optional[int] = Field(default=None, ge=1, alias="maxTimeoutSeconds")
    output_schema: Optional[Dict[str, Any]] = Field(default=None, alias="outputSchema")
    extra: Optional[Dict[str, Any]] = None

    @field_validator("max_amount_required", mode="before")
    @classmethod
    def _atomic_amount(cls, value: Any) -> str:
        if isinstance(value, bool):
            raise ValueError("maxAmountRequired must be an integer amount")
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str) or not _ATOMIC_AMOUNT.match(value):
            raise ValueError(
                f"maxAmountRequired must be a non-negative integer string, got {value!r}"
            )
        return value

    @property
    def resource_path(self) -> Optional[str]:
        """Path component of ``resource``, or None when the server did not name one."""
        if not self.resource:
            return None
        parsed = urlparse(self.resource)
        if parsed.scheme and parsed.netloc:
            return parsed.path or "/"
        return self.resource

    def echo(self) -> Dict[str, Any]:
        """Wire form of the requirement, extra fields included, for echoing back."""
        data = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data.update(self.model_extra or {})
        return data


# ============================================================================
# Step 2: Client's paid retry
# ============================================================================

class TransferAuthorization(CanonicalModel):
    """EIP-3009 ``transferWithAuthorization`` fields, stringified for transport.

    Attributes:
        from_: Payer address (``from`` on the wire).
        to: Recipient address.
        value: Amount in atomic units; equals the requirement's maxAmountRequired.
        valid_after: Unix timestamp from which the authorization is valid.
        valid_before: Unix timestamp at which the authorization expires.
        nonce: bytes32 nonce, 0x-prefixed hex.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(..., alias="from")
    to: str
    value: str
    valid_after: str = Field(..., alias="validAfter")
    valid_before: str = Field(..., alias="validBefore")
    nonce: str


class ExactEvmPayload(CanonicalModel):
    """Scheme payload for "exact" on EVM networks."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signature: str
    authorization: TransferAuthorization


class PaymentAuthorization(CanonicalModel):
    """Client-signed proof of payment satisfying one requirement.

    Created fresh for every paid retry and never cached or reused.

    Attributes:
        x402_version: Protocol version.
        scheme: Scheme of the satisfied requirement.
        network: Network of the satisfied requirement.
        resource: Path of the request the authorization was signed for.
        payload: Scheme payload (signature + transfer authorization).
        accepted: The satisfied requirement exactly as the server sent it.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    x402_version: int = Field(default=CURRENT_VERSION.value, alias="x402Version")
    scheme: str
    network: str
    resource: str
    payload: ExactEvmPayload
    accepted: Dict[str, Any] = Field(default_factory=dict)

    @property
    def signature(self) -> str:
        return self.payload.signature

    @property
    def signer(self) -> str:
        return self.payload.authorization.from_

    @property
    def amount(self) -> str:
        return self.payload.authorization.value

    @property
    def nonce(self) -> str:
        return self.payload.authorization.nonce

    @property
    def expiry(self) -> int:
        return int(self.payload.authorization.valid_before)

    def to_header_value(self) -> str:
        """Base64 JSON value for the ``X-PAYMENT`` request header."""
        return encode_header_json(self)

    def __repr__(self) -> str:
        return (
            f"PaymentAuthorization(scheme={self.scheme!r}, network={self.network!r}, "
            f"resource={self.resource!r}, amount={self.amount!r}, signer={self.signer!r})"
        )


# ============================================================================
# Step 3: Server's settlement receipt
# ============================================================================

class SettlementResponse(CanonicalModel):
    """Decoded ``X-PAYMENT-RESPONSE`` header of a paid response.

    Attributes:
        success: Whether the server settled the payment.
        transaction: Settlement transaction hash, when settled on-chain.
        network: Network the payment settled on.
        payer: Address that paid.
        error_reason: Server explanation when settlement failed.
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    success: bool = True
    transaction: Optional[str] = None
    network: Optional[str] = None
    payer: Optional[str] = None
    error_reason: Optional[str] = Field(default=None, alias="errorReason")
