"""
EVM Network Configuration

Static network and asset table for the networks the payment gate
settles on, plus helpers that resolve x402 network names (and their
CAIP-2 aliases) to a chain configuration.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class EvmAssetConfig(BaseModel):
    """Token asset configuration."""
    symbol: str
    address: str = Field(..., description="Token contract address")
    name: str = Field(..., description="EIP-712 domain name of the token")
    decimals: int = Field(..., description="Token decimals")
    version: str = Field(..., description="EIP-712 domain version of the token")


class EvmNetworkConfig(BaseModel):
    """EVM network configuration keyed by x402 network name."""
    network: str
    caip2: str
    chain_id: int
    explorer_url: str
    assets: Dict[str, EvmAssetConfig] = Field(default_factory=dict, description="Supported assets")

    def asset_by_address(self, address: str) -> Optional[EvmAssetConfig]:
        wanted = address.lower()
        for asset in self.assets.values():
            if asset.address.lower() == wanted:
                return asset
        return None


# Raw network configuration data
_EVM_NETWORKS_DATA: Dict = {
    "base": {
        "caip2": "eip155:8453",
        "chain_id": 8453,
        "explorer_url": "https://basescan.org",
        "assets": {
            "USDC": {
                "address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
                "name": "USD Coin",
                "decimals": 6,
                "version": "2"
            }
        }
    },
    "base-sepolia": {
        "caip2": "eip155:84532",
        "chain_id": 84532,
        "explorer_url": "https://sepolia.basescan.org",
        "assets": {
            "USDC": {
                "address": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
                "name": "USDC",
                "decimals": 6,
                "version": "2"
            }
        }
    },
}

EVM_NETWORKS: Dict[str, EvmNetworkConfig] = {
    name: EvmNetworkConfig(
        network=name,
        caip2=data["caip2"],
        chain_id=data["chain_id"],
        explorer_url=data["explorer_url"],
        assets={
            symbol: EvmAssetConfig(symbol=symbol, **asset)
            for symbol, asset in data["assets"].items()
        },
    )
    for name, data in _EVM_NETWORKS_DATA.items()
}

_CAIP2_ALIASES: Dict[str, str] = {cfg.caip2: name for name, cfg in EVM_NETWORKS.items()}

#: Scheme identifiers the EVM signer can produce.
EVM_SCHEMES = frozenset({"exact"})


def canonical_network(network: str) -> str:
    """Map a CAIP-2 id (``eip155:8453``) or any-case name to the x402 network name."""
    name = network.strip()
    return _CAIP2_ALIASES.get(name, name.lower())


def get_network_config(network: str) -> Optional[EvmNetworkConfig]:
    """
    Resolve a network name or CAIP-2 id to its configuration.

    Returns:
        EvmNetworkConfig, or None when the network is not an EVM network we sign for.
    """
    return EVM_NETWORKS.get(canonical_network(network))
