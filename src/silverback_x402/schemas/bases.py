"""
Base Schema Models for the x402 client

This module defines the base classes that the wire and signing models
inherit from.

Core Classes:
    - CanonicalModel: Pydantic base model with deterministic compact JSON
      serialization, used wherever bytes go on the wire or under a signature
    - ClaimSet: The bounded-lifetime claim tuple that every signer consumes

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

#: Upper bound on ``expires_at - not_before`` for any signed claim set.
MAX_CLAIM_WINDOW_SECONDS: int = 120


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Ensures consistent, deterministic JSON representation suitable for
    header encoding and signing: sorted keys, no extra whitespace, aliases
    applied so the output matches the camelCase wire format.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a compact JSON string with sorted keys.

        ``to_dict()`` converts nested models, enums and Decimals to plain
        types, then ``json.dumps`` fixes key order and separators.

        Returns:
            str: Compact JSON string with sorted keys.
        """
        return json.dumps(
            self.to_dict(),
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to its wire dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary keyed by wire (alias) names, without None values.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClaimSet(CanonicalModel):
    """
    Bounded-lifetime claims consumed by every signer.

    Both the payment signer and the discovery JWT signer are driven by the
    same claim tuple; each maps it onto its own token format (EIP-3009
    ``validAfter``/``validBefore``/``nonce`` or JWT ``nbf``/``exp``/header nonce).

    Attributes:
        subject: Identity the token speaks for (wallet address or API key id)
        audience: What the token is bound to (request path, or "METHOD host/path")
        not_before: Unix timestamp at which the token becomes valid
        expires_at: Unix timestamp at which the token stops being valid
        nonce: Single-use random value, hex encoded
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: str = Field(..., min_length=1, description="Identity the token speaks for")
    audience: str = Field(..., min_length=1, description="Resource the token is bound to")
    not_before: int = Field(..., ge=0, description="Validity start (unix seconds)")
    expires_at: int = Field(..., ge=0, description="Validity end (unix seconds)")
    nonce: str = Field(..., min_length=32, description="Single-use random nonce (hex)")

    @model_validator(mode="after")
    def _check_window(self) -> "ClaimSet":
        window = self.expires_at - self.not_before
        if window <= 0:
            raise ValueError("expires_at must be strictly after not_before")
        if window > MAX_CLAIM_WINDOW_SECONDS:
            raise ValueError(
                f"claim window of {window}s exceeds the {MAX_CLAIM_WINDOW_SECONDS}s limit"
            )
        return self

    @property
    def lifetime(self) -> int:
        return self.expires_at - self.not_before
