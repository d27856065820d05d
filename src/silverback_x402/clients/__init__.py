"""
Client module for x402 payment negotiation.

Provides the payment-aware httpx client, the discovery catalog client and
the typed Silverback API facade.
"""

from .http_client import Http402Client
from .discovery import DiscoveryClient, DISCOVERY_BASE_URL, DISCOVERY_RESOURCES_PATH
from .silverback import (
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

__all__ = [
    "Http402Client",
    "DiscoveryClient",
    "DISCOVERY_BASE_URL",
    "DISCOVERY_RESOURCES_PATH",
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
