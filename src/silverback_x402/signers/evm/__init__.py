from .signer import ExactEvmSigner
from .schemas import EVMECDSASignature, TransferTypedData
from .signatures import build_transfer_typed_data, sign_transfer_authorization
from ...schemas.networks import (
    EVM_NETWORKS,
    EVM_SCHEMES,
    EvmAssetConfig,
    EvmNetworkConfig,
    canonical_network,
    get_network_config,
)

__all__ = [
    "ExactEvmSigner",
    "EVMECDSASignature",
    "TransferTypedData",
    "build_transfer_typed_data",
    "sign_transfer_authorization",
    "EVM_NETWORKS",
    "EVM_SCHEMES",
    "EvmAssetConfig",
    "EvmNetworkConfig",
    "canonical_network",
    "get_network_config",
]
