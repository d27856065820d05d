"""
EVM "exact" Scheme Payment Signer

Signs x402 "exact" payment requirements on EVM networks as ERC-3009
``transferWithAuthorization`` messages. The held key never leaves the
``PrivateKeyHandle``; the signer exposes only the derived payer address.

Example:
    signer = ExactEvmSigner(PrivateKeyHandle("0x..."))
    if signer.supports(requirement):
        authorization = signer.sign(requirement, "/api/v1/swap-quote")
"""

import logging

from eth_account import Account

from ...engine.exceptions import ConfigurationError, MalformedRequirementsError
from ...schemas.bases import MAX_CLAIM_WINDOW_SECONDS
from ...schemas.https import (
    ExactEvmPayload,
    PaymentAuthorization,
    PaymentRequirement,
    TransferAuthorization,
)
from ..bases import PaymentSigner
from ..claims import issue_claims
from ..secrets import PrivateKeyHandle, normalize_hex_key
from ...schemas.networks import EVM_SCHEMES, get_network_config
from .signatures import build_transfer_typed_data, sign_transfer_authorization

logger = logging.getLogger(__name__)


class ExactEvmSigner(PaymentSigner):
    """
    Client-side signer for the "exact" scheme on EVM networks.

    Attributes:
        family: Always "evm".
        wallet_address: Checksum payer address derived from the key.

    Raises:
        ConfigurationError: If no key is supplied or the key is not a valid
            secp256k1 private key.
    """

    family = "evm"

    def __init__(self, private_key: PrivateKeyHandle):
        if private_key is None:
            raise ConfigurationError("No wallet private key configured for payment signing")
        self._private_key = private_key
        try:
            account = Account.from_key(normalize_hex_key(private_key.reveal()))
        except (ValueError, TypeError):
            raise ConfigurationError(f"{private_key.label} is not a valid EVM private key") from None
        self.wallet_address = account.address

    def supports(self, requirement: PaymentRequirement) -> bool:
        return (
            requirement.scheme.lower() in EVM_SCHEMES
            and get_network_config(requirement.network) is not None
        )

    def sign(self, requirement: PaymentRequirement, resource: str) -> PaymentAuthorization:
        network = get_network_config(requirement.network)
        if network is None or requirement.scheme.lower() not in EVM_SCHEMES:
            raise MalformedRequirementsError(
                f"cannot sign scheme {requirement.scheme!r} on network {requirement.network!r}"
            )

        window = min(requirement.max_timeout_seconds or MAX_CLAIM_WINDOW_SECONDS, MAX_CLAIM_WINDOW_SECONDS)
        claims = issue_claims(
            subject=self.wallet_address,
            audience=resource,
            lifetime=window,
            nonce_bytes=32,
        )
        typed_data = build_transfer_typed_data(
            requirement=requirement,
            network=network,
            payer=self.wallet_address,
            claims=claims,
        )
        signature = sign_transfer_authorization(
            private_key=self._private_key,
            typed_data=typed_data,
        )

        authorization = PaymentAuthorization(
            scheme=requirement.scheme,
            network=requirement.network,
            resource=resource,
            payload=ExactEvmPayload(
                signature=signature.to_packed_hex(),
                authorization=TransferAuthorization(
                    from_=typed_data.authorizer,
                    to=typed_data.recipient,
                    value=requirement.max_amount_required,
                    valid_after=str(typed_data.valid_after),
                    valid_before=str(typed_data.valid_before),
                    nonce=typed_data.nonce,
                ),
            ),
            accepted=requirement.echo(),
        )
        logger.info(
            "Signed %s payment of %s on %s for %s (valid %ss)",
            requirement.scheme, requirement.max_amount_required,
            requirement.network, resource, claims.lifetime,
        )
        return authorization

    def get_wallet_address(self) -> str:
        return self.wallet_address

    def __repr__(self) -> str:
        return f"ExactEvmSigner(wallet_address={self.wallet_address!r})"
