"""
EVM Signing Schema Models

Pydantic models for the EVM side of the "exact" payment scheme.

    - EVMECDSASignature: v/r/s ECDSA signature with packed-hex encoding
    - TransferTypedData: EIP-712 envelope for ERC-3009 ``transferWithAuthorization``
"""

from typing import Any, Dict, List

from pydantic import Field

from ...schemas.bases import CanonicalModel

_TRANSFER_TYPES: Dict[str, List[Dict[str, str]]] = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    "TransferWithAuthorization": [
        {"name": "from", "type": "address"},
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "validAfter", "type": "uint256"},
        {"name": "validBefore", "type": "uint256"},
        {"name": "nonce", "type": "bytes32"},
    ],
}


class EVMECDSASignature(CanonicalModel):
    """
    EVM ECDSA signature (v, r, s).

    Attributes:
        v: ECDSA recovery ID (27 or 28).
        r: r component, 32 bytes as hex (0x prefix optional).
        s: s component, 32 bytes as hex (0x prefix optional).

    Example::

        sig = EVMECDSASignature(v=27, r="0x" + "a" * 64, s="0x" + "b" * 64)
        sig.to_packed_hex()
    """

    v: int = Field(..., ge=27, le=28, description="ECDSA recovery ID (27 or 28)")
    r: str = Field(..., description="Signature r component")
    s: str = Field(..., description="Signature s component")

    def validate_format(self) -> bool:
        """
        Validate r/s components.

        r and s are integers rendered as hex, so leading zero bytes may be
        missing; anything longer than 64 hex chars or not hex is rejected.

        Raises:
            ValueError: Descriptive message on the first failed check.
        """
        for name, val in [("r", self.r), ("s", self.s)]:
            hex_str = val.replace("0x", "").replace("0X", "")
            if not hex_str or len(hex_str) > 64:
                raise ValueError(f"Invalid {name}: expected up to 64 hex chars, got {len(hex_str)}")
            try:
                int(hex_str, 16)
            except ValueError:
                raise ValueError(f"Invalid {name}: not valid hexadecimal")
        return True

    def to_packed_hex(self) -> str:
        """
        Encode v/r/s into a packed 65-byte hex string (``r || s || v``).

        Returns:
            0x-prefixed 132-character hex string.
        """
        self.validate_format()
        r = self.r.replace("0x", "").replace("0X", "").zfill(64)
        s = self.s.replace("0x", "").replace("0X", "").zfill(64)
        return "0x" + r + s + format(self.v, "02x")


class TransferTypedData(CanonicalModel):
    """
    EIP-712 typed data for ERC-3009 ``transferWithAuthorization``.

    ``to_typed_data()`` returns the ``{types, primaryType, domain, message}``
    layout accepted by ``eth_account.Account.sign_typed_data(full_message=...)``.
    """

    domain_name: str
    domain_version: str
    chain_id: int = Field(..., ge=1)
    verifying_contract: str
    authorizer: str
    recipient: str
    value: int = Field(..., ge=0)
    valid_after: int = Field(..., ge=0)
    valid_before: int = Field(..., ge=0)
    nonce: str = Field(..., description="bytes32 nonce, 0x-prefixed hex")

    def to_typed_data(self) -> Dict[str, Any]:
        return {
            "types": _TRANSFER_TYPES,
            "primaryType": "TransferWithAuthorization",
            "domain": {
                "name": self.domain_name,
                "version": self.domain_version,
                "chainId": self.chain_id,
                "verifyingContract": self.verifying_contract,
            },
            "message": {
                "from": self.authorizer,
                "to": self.recipient,
                "value": self.value,
                "validAfter": self.valid_after,
                "validBefore": self.valid_before,
                "nonce": bytes.fromhex(self.nonce[2:]),
            },
        }
