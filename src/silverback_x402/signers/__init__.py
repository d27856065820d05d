from .bases import PaymentSigner
from .bearer import CdpJwtSigner, normalize_ec_private_key
from .claims import current_timestamp, issue_claims, new_nonce
from .evm import ExactEvmSigner
from .hub import SignerHub
from .secrets import PrivateKeyHandle, normalize_hex_key

__all__ = [
    "PaymentSigner",
    "CdpJwtSigner",
    "normalize_ec_private_key",
    "current_timestamp",
    "issue_claims",
    "new_nonce",
    "ExactEvmSigner",
    "SignerHub",
    "PrivateKeyHandle",
    "normalize_hex_key",
]
