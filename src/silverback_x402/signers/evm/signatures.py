"""
EVM Off-Chain Signing Utilities

Local EIP-712 signing helpers for ERC-3009 ``transferWithAuthorization``,
the settlement primitive behind the x402 "exact" scheme on EVM networks.
All cryptographic operations are performed in-process using
``eth_account``; no RPC calls or on-chain state queries are made.

Exported helpers
----------------
build_transfer_typed_data
    Map a payment requirement plus a claim set onto the EIP-712
    ``TransferTypedData`` envelope without signing. Useful when the signing
    step is handled externally (e.g. a hardware wallet or MPC service).

sign_transfer_authorization
    Sign a ``TransferTypedData`` with a held private key and return the
    ``EVMECDSASignature`` (v, r, s).
"""

from eth_account import Account
from web3 import Web3

from ...engine.exceptions import MalformedRequirementsError
from ...schemas.bases import ClaimSet
from ...schemas.https import PaymentRequirement
from ..secrets import PrivateKeyHandle, normalize_hex_key
from ...schemas.networks import EvmNetworkConfig
from .schemas import EVMECDSASignature, TransferTypedData


def _checksum(field: str, address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise MalformedRequirementsError(f"{field} is not a valid EVM address: {address!r}") from e


def build_transfer_typed_data(
    *,
    requirement: PaymentRequirement,
    network: EvmNetworkConfig,
    payer: str,
    claims: ClaimSet,
) -> TransferTypedData:
    """
    Build the ERC-3009 typed data that pays ``requirement`` from ``payer``.

    The EIP-712 domain name/version come from ``requirement.extra`` when the
    server provides them (``{"name": ..., "version": ...}``), otherwise from
    the known asset table for ``network``. The asset defaults to the
    network's USDC contract when the requirement omits it.

    Args:
        requirement: Selected payment requirement.
        network:     Resolved network configuration.
        payer:       Address derived from the signing key.
        claims:      Claim set supplying the validity window and nonce.

    Returns:
        ``TransferTypedData`` whose value equals ``maxAmountRequired``.

    Raises:
        MalformedRequirementsError: If the asset is unknown and the server
            did not supply the EIP-712 domain, or an address is invalid.
    """
    asset_address = requirement.asset or network.assets["USDC"].address
    known_asset = network.asset_by_address(asset_address)
    extra = requirement.extra or {}

    domain_name = extra.get("name") or (known_asset.name if known_asset else None)
    domain_version = extra.get("version") or (known_asset.version if known_asset else None)
    if not domain_name or not domain_version:
        raise MalformedRequirementsError(
            f"asset {asset_address} on {network.network} is unknown and the requirement "
            "does not carry its EIP-712 domain (extra.name / extra.version)"
        )

    return TransferTypedData(
        domain_name=str(domain_name),
        domain_version=str(domain_version),
        chain_id=network.chain_id,
        verifying_contract=_checksum("asset", asset_address),
        authorizer=_checksum("payer", payer),
        recipient=_checksum("payTo", requirement.pay_to),
        value=int(requirement.max_amount_required),
        valid_after=claims.not_before,
        valid_before=claims.expires_at,
        nonce="0x" + claims.nonce,
    )


def sign_transfer_authorization(
    *,
    private_key: PrivateKeyHandle,
    typed_data: TransferTypedData,
) -> EVMECDSASignature:
    """
    Sign ERC-3009 typed data and return the (v, r, s) signature.

    The EIP-712 structured-data hash is computed from the token's domain
    separator and the authorization message, then signed with the held
    key to produce canonical ECDSA components.

    Args:
        private_key: Handle of the payer's secp256k1 key.
        typed_data:  Envelope built by ``build_transfer_typed_data``.

    Returns:
        ``EVMECDSASignature``; call ``to_packed_hex()`` for the wire form.

    Raises:
        ValueError: If ``valid_after >= valid_before``.
    """
    if typed_data.valid_after >= typed_data.valid_before:
        raise ValueError(
            f"valid_after ({typed_data.valid_after}) must be strictly less than "
            f"valid_before ({typed_data.valid_before})"
        )

    signed = Account.sign_typed_data(
        normalize_hex_key(private_key.reveal()),
        full_message=typed_data.to_typed_data(),
    )
    return EVMECDSASignature(v=signed.v, r=hex(signed.r), s=hex(signed.s))
