"""
Signer Hub - Unified Payment Signer Gateway

Single entry point the negotiator uses to reach payment signers. It
1. Owns the configured signers, keyed by network family
2. Routes a requirement to the signer able to satisfy it
3. Reports whether any payment credential is configured at all

Architecture:
    SignerHub (you are here)
        ├── ExactEvmSigner (EIP-3009 on EVM networks)
        └── future network families register alongside
"""

from typing import Dict, List, Optional, Union

from pydantic import SecretStr

from ..schemas.https import PaymentAuthorization, PaymentRequirement
from .bases import PaymentSigner
from .evm.signer import ExactEvmSigner
from .secrets import PrivateKeyHandle


class SignerHub:
    """
    Unified Payment Signer Hub.

    Holds read-only signers for the process lifetime; safe to share across
    concurrent negotiations.

    Args:
        evm_private_key: Optional wallet key; when given an ``ExactEvmSigner``
            is registered for it.
        signers: Additional pre-built signers.
    """

    def __init__(
        self,
        evm_private_key: Union[PrivateKeyHandle, SecretStr, str, None] = None,
        signers: Optional[List[PaymentSigner]] = None,
    ):
        self._signers: Dict[str, PaymentSigner] = {}

        if evm_private_key is not None:
            handle = (
                evm_private_key
                if isinstance(evm_private_key, PrivateKeyHandle)
                else PrivateKeyHandle(evm_private_key, label="wallet private key")
            )
            self.register(ExactEvmSigner(handle))

        for signer in signers or []:
            self.register(signer)

    def register(self, signer: PaymentSigner) -> None:
        """
        Register a signer for its network family, replacing any previous one.

        Raises:
            TypeError: If ``signer`` is not a ``PaymentSigner`` or declares no family.
        """
        if not isinstance(signer, PaymentSigner) or not signer.family:
            raise TypeError(f"Not a payment signer: {type(signer).__name__}")
        self._signers[signer.family] = signer

    @property
    def configured(self) -> bool:
        """True when at least one payment credential is held."""
        return bool(self._signers)

    def signer_for(self, requirement: PaymentRequirement) -> Optional[PaymentSigner]:
        """Return the signer able to satisfy ``requirement``, if any."""
        for signer in self._signers.values():
            if signer.supports(requirement):
                return signer
        return None

    def signature(self, requirement: PaymentRequirement, resource: str) -> PaymentAuthorization:
        """
        Sign ``requirement`` for ``resource`` with the matching signer.

        Raises:
            TypeError: If no registered signer supports the requirement.
        """
        signer = self.signer_for(requirement)
        if signer is None:
            raise TypeError(
                f"No signer registered for scheme {requirement.scheme!r} on {requirement.network!r}"
            )
        return signer.sign(requirement, resource)

    def wallet_addresses(self) -> Dict[str, str]:
        return {family: signer.get_wallet_address() for family, signer in self._signers.items()}
