"""
Abstract Base Class for Payment Signers

Defines the interface every payment signer (EVM today, other network
families later) must implement. A signer holds one credential for the
process lifetime and turns a server's payment requirement into a signed,
bounded-lifetime ``PaymentAuthorization``.

Signers are pure: no network I/O, no shared mutable state, safe to call
from any number of concurrent negotiations.
"""

from abc import ABC, abstractmethod

from ..schemas.https import PaymentAuthorization, PaymentRequirement


class PaymentSigner(ABC):
    """
    Abstract Base Class for client-side payment signers.

    Key Responsibilities:
    1. supports: Report whether a requirement's scheme/network can be signed
    2. sign: Produce an authorization for exactly the required amount,
       bound to exactly the requested resource path
    3. get_wallet_address: Expose the payer address (never the key)

    Example Implementation:
        class ExactEvmSigner(PaymentSigner):
            # EIP-3009 transferWithAuthorization on EVM networks
            pass
    """

    #: Network family this signer serves (e.g. "evm").
    family: str = ""

    @abstractmethod
    def supports(self, requirement: PaymentRequirement) -> bool:
        """
        Check whether this signer can satisfy ``requirement``.

        Args:
            requirement: Parsed payment requirement

        Returns:
            bool: True when both scheme and network are signable here
        """
        pass

    @abstractmethod
    def sign(self, requirement: PaymentRequirement, resource: str) -> PaymentAuthorization:
        """
        Sign an authorization satisfying ``requirement`` for ``resource``.

        The authorization amount must equal ``requirement.max_amount_required``
        string-for-string, and its resource must equal ``resource`` exactly.

        Args:
            requirement: Selected payment requirement
            resource: URL path of the request being paid for

        Returns:
            PaymentAuthorization: Fresh authorization, never to be reused

        Raises:
            MalformedRequirementsError: If the requirement lacks data the scheme needs
        """
        pass

    @abstractmethod
    def get_wallet_address(self) -> str:
        """
        Get the payer address derived from the held credential.

        Returns:
            str: Address in the network family's canonical format
        """
        pass
