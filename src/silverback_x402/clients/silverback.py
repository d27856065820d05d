"""
Silverback DEX Intelligence API Client

Typed operations over the payment-gated Silverback API. Each operation maps
to exactly one HTTP path and returns the ``NegotiationResult`` of one
logical call; response bodies are passed through untouched.

Free endpoints (no payment gate):
    get_pricing, health_check
Payment-gated endpoints:
    get_token_price, get_swap_quote, execute_swap, get_technical_analysis,
    run_backtest, get_pool_analysis, get_yield_opportunities,
    get_lp_analysis, get_top_pools, get_top_protocols, get_top_coins,
    get_dex_metrics

Example:
    async with SilverbackClient.from_env() as client:
        result = await client.get_swap_quote(
            SwapQuoteRequest(token_in=BASE_TOKENS["WETH"], token_out=BASE_TOKENS["USDC"], amount_in="1.0")
        )
        quote = result.unwrap().json()
"""

import logging
from typing import Dict, Literal, Optional
from urllib.parse import quote

from pydantic import Field

from ..config import ClientSettings
from ..engine.results import NegotiationResult
from ..schemas.bases import CanonicalModel
from ..signers.hub import SignerHub
from ..signers.secrets import PrivateKeyHandle
from .http_client import Http402Client

logger = logging.getLogger(__name__)

#: Common token addresses on Base.
BASE_TOKENS: Dict[str, str] = {
    "WETH": "0x4200000000000000000000000000000000000006",
    "USDC": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
    "USDbC": "0xd9aAEc86B65D86f6A7B5B1b0c42FFA531710b6CA",
    "DAI": "0x50c5725949A6F0c72E6C4a641F24049A917DB0Cb",
    "BACK": "0x558881c4959e9cf961a7E1815FCD6586906babd2",
}


# ============================================================================
# Request Bodies
# ============================================================================

class SwapQuoteRequest(CanonicalModel):
    """Quote request; ``amount_in`` is human-readable (e.g. "1.0")."""
    token_in: str = Field(..., alias="tokenIn")
    token_out: str = Field(..., alias="tokenOut")
    amount_in: str = Field(..., alias="amountIn")


class SwapRequest(CanonicalModel):
    """Swap execution request; ``slippage`` is a percentage string."""
    token_in: str = Field(..., alias="tokenIn")
    token_out: str = Field(..., alias="tokenOut")
    amount_in: str = Field(..., alias="amountIn")
    slippage: Optional[str] = None
    wallet_address: Optional[str] = Field(default=None, alias="walletAddress")


class TechnicalAnalysisRequest(CanonicalModel):
    token: str
    timeframe: Optional[str] = None


class BacktestRequest(CanonicalModel):
    token: str
    strategy: Literal["momentum", "mean_reversion"]
    period: Optional[str] = None
    signal_threshold: Optional[float] = Field(default=None, ge=0, le=100, alias="signalThreshold")


class PoolAnalysisRequest(CanonicalModel):
    """Either the token pair or ``pool_id`` identifies the pool."""
    token_a: Optional[str] = Field(default=None, alias="tokenA")
    token_b: Optional[str] = Field(default=None, alias="tokenB")
    pool_id: Optional[str] = Field(default=None, alias="poolId")


class YieldRequest(CanonicalModel):
    token: str
    risk_tolerance: Optional[Literal["low", "medium", "high"]] = Field(default=None, alias="riskTolerance")


class LPAnalysisRequest(CanonicalModel):
    token_pair: Optional[str] = Field(default=None, alias="tokenPair")
    token_a: Optional[str] = Field(default=None, alias="tokenA")
    token_b: Optional[str] = Field(default=None, alias="tokenB")


class TopPoolsRequest(CanonicalModel):
    limit: Optional[int] = Field(default=None, ge=1, le=20)
    min_tvl: Optional[float] = Field(default=None, alias="minTvl")


class TopProtocolsRequest(CanonicalModel):
    limit: Optional[int] = Field(default=None, ge=1, le=50)
    chain: Optional[Literal["base", "ethereum", "arbitrum", "all"]] = None
    category: Optional[Literal["dex", "lending", "bridge", "staking", "derivatives"]] = None


class TopCoinsRequest(CanonicalModel):
    limit: Optional[int] = Field(default=None, ge=1, le=50)
    chain: Optional[Literal["base", "ethereum", "all"]] = None


# ============================================================================
# Client
# ============================================================================

class SilverbackClient:
    """
    Silverback DEX Intelligence API client with x402 payment handling.

    Args:
        settings: Client settings; defaults apply when omitted.
        signer_hub: Pre-built signer hub; built from ``settings.wallet_private_key``
            when omitted.
        **http_kwargs: Extra ``httpx.AsyncClient`` arguments (e.g. ``transport``).
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        signer_hub: Optional[SignerHub] = None,
        **http_kwargs
    ):
        self.settings = settings or ClientSettings()
        if signer_hub is None:
            key = self.settings.wallet_private_key
            signer_hub = SignerHub(
                evm_private_key=PrivateKeyHandle(key, label="wallet private key") if key else None
            )
        http_kwargs.setdefault("timeout", self.settings.request_timeout)
        self._http = Http402Client(
            signer_hub,
            network=self.settings.network,
            preferred_networks=self.settings.preferred_networks,
            base_url=self.settings.service_url,
            **http_kwargs
        )

    @classmethod
    def from_env(cls, env_file=None, **http_kwargs) -> "SilverbackClient":
        return cls(ClientSettings.from_env(env_file), **http_kwargs)

    @property
    def http(self) -> Http402Client:
        return self._http

    @property
    def wallet_address(self) -> Optional[str]:
        return self._http.signer_hub.wallet_addresses().get("evm")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SilverbackClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, query: Optional[CanonicalModel] = None) -> NegotiationResult:
        params = query.to_dict() if query is not None else None
        return await self._http.negotiate("GET", path, params=params or None)

    async def _post(self, path: str, body: CanonicalModel) -> NegotiationResult:
        return await self._http.negotiate("POST", path, json=body.to_dict())

    # ---------------- free ----------------

    async def get_pricing(self) -> NegotiationResult:
        """Pricing table of all endpoints."""
        return await self._get("/api/v1/pricing")

    async def health_check(self) -> NegotiationResult:
        return await self._get("/health")

    # ---------------- payment-gated ----------------

    async def get_token_price(self, token: str) -> NegotiationResult:
        """Price, 24h change, volume and market cap of ``token`` (CoinGecko id or symbol)."""
        return await self._get(f"/api/v1/price/{quote(token, safe='')}")

    async def get_swap_quote(self, request: SwapQuoteRequest) -> NegotiationResult:
        return await self._post("/api/v1/swap-quote", request)

    async def execute_swap(self, request: SwapRequest) -> NegotiationResult:
        """Execute a swap; the server performs the on-chain trade."""
        return await self._post("/api/v1/execute-swap", request)

    async def get_technical_analysis(self, request: TechnicalAnalysisRequest) -> NegotiationResult:
        return await self._post("/api/v1/technical-analysis", request)

    async def run_backtest(self, request: BacktestRequest) -> NegotiationResult:
        return await self._post("/api/v1/backtest", request)

    async def get_pool_analysis(self, request: PoolAnalysisRequest) -> NegotiationResult:
        return await self._post("/api/v1/pool-analysis", request)

    async def get_yield_opportunities(self, request: YieldRequest) -> NegotiationResult:
        return await self._post("/api/v1/defi-yield", request)

    async def get_lp_analysis(self, request: LPAnalysisRequest) -> NegotiationResult:
        return await self._post("/api/v1/lp-analysis", request)

    async def get_top_pools(self, request: Optional[TopPoolsRequest] = None) -> NegotiationResult:
        return await self._get("/api/v1/top-pools", request)

    async def get_top_protocols(self, request: Optional[TopProtocolsRequest] = None) -> NegotiationResult:
        return await self._get("/api/v1/top-protocols", request)

    async def get_top_coins(self, request: Optional[TopCoinsRequest] = None) -> NegotiationResult:
        return await self._get("/api/v1/top-coins", request)

    async def get_dex_metrics(self) -> NegotiationResult:
        """Aggregator, router and supported token metadata."""
        return await self._get("/api/v1/dex-metrics")
