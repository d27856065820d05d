"""
silverback_x402 - x402 micropayment client for the Silverback DEX API.

Quick start:
    from silverback_x402 import SilverbackClient, SwapQuoteRequest, BASE_TOKENS

    async with SilverbackClient.from_env() as client:
        result = await client.get_swap_quote(
            SwapQuoteRequest(token_in=BASE_TOKENS["WETH"], token_out=BASE_TOKENS["USDC"], amount_in="1.0")
        )
        if result.ok:
            print(result.json())
        else:
            print(result.kind, result.error)
"""

from .config import ClientSettings
from .engine import (
    X402ClientError,
    ConfigurationError,
    PaymentNotConfiguredError,
    MalformedRequirementsError,
    UnsupportedNetworkError,
    PaymentRejectedError,
    RequestFailedError,
    NetworkError,
    FailureKind,
    PaymentSuccess,
    PaymentFailure,
    NegotiationResult,
    PaymentNegotiator,
    PaymentRequirementsParser,
)
from .signers import SignerHub, ExactEvmSigner, CdpJwtSigner, PrivateKeyHandle
from .clients import (
    Http402Client,
    DiscoveryClient,
    SilverbackClient,
    BASE_TOKENS,
    SwapQuoteRequest,
    SwapRequest,
    TechnicalAnalysisRequest,
    BacktestRequest,
    PoolAnalysisRequest,
    YieldRequest,
    LPAnalysisRequest,
    TopPoolsRequest,
    TopProtocolsRequest,
    TopCoinsRequest,
)

__version__ = "0.1.0"

__all__ = [
    "ClientSettings",
    "X402ClientError",
    "ConfigurationError",
    "PaymentNotConfiguredError",
    "MalformedRequirementsError",
    "UnsupportedNetworkError",
    "PaymentRejectedError",
    "RequestFailedError",
    "NetworkError",
    "FailureKind",
    "PaymentSuccess",
    "PaymentFailure",
    "NegotiationResult",
    "PaymentNegotiator",
    "PaymentRequirementsParser",
    "SignerHub",
    "ExactEvmSigner",
    "CdpJwtSigner",
    "PrivateKeyHandle",
    "Http402Client",
    "DiscoveryClient",
    "SilverbackClient",
    "BASE_TOKENS",
    "SwapQuoteRequest",
    "SwapRequest",
    "TechnicalAnalysisRequest",
    "BacktestRequest",
    "PoolAnalysisRequest",
    "YieldRequest",
    "LPAnalysisRequest",
    "TopPoolsRequest",
    "TopProtocolsRequest",
    "TopCoinsRequest",
]
