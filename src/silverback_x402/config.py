"""
Client settings loaded from the environment.

Secrets are held as pydantic ``SecretStr`` from the moment they are read,
so printing or logging a settings object never reveals them.

Environment Variables:
    X402_SERVICE_URL: API origin (default https://x402.silverbackdefi.app)
    X402_NETWORK: "base" or "base-sepolia" (default "base")
    X402_REQUEST_TIMEOUT: Per-request timeout in seconds (default 30)
    X402_PREFERRED_NETWORKS: Optional comma-separated network preference list
    WALLET_PRIVATE_KEY: Payment wallet key; ACP_PRIVATE_KEY and
        SWAP_EXECUTOR_PRIVATE_KEY are read as fallbacks, in that order
    CDP_API_KEY_ID / CDP_API_KEY_SECRET: Discovery API key pair
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .engine.exceptions import ConfigurationError
from .schemas.networks import canonical_network, get_network_config
from .signers.secrets import normalize_hex_key

DEFAULT_SERVICE_URL = "https://x402.silverbackdefi.app"
DEFAULT_NETWORK = "base"
DEFAULT_REQUEST_TIMEOUT = 30.0

WALLET_KEY_VARIABLES = ("WALLET_PRIVATE_KEY", "ACP_PRIVATE_KEY", "SWAP_EXECUTOR_PRIVATE_KEY")


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def _network_name(value: str) -> str:
    name = canonical_network(value)
    if get_network_config(name) is None:
        raise ValueError(f"unsupported network {value!r}; expected base or base-sepolia")
    return name


class ClientSettings(BaseModel):
    """
    Settings for ``SilverbackClient``.

    Attributes:
        service_url: Origin of the payment-gated API.
        network: Network payments are made on.
        request_timeout: Timeout in seconds for each network operation.
        wallet_private_key: Payment wallet key, normalized to a ``0x`` prefix.
        cdp_api_key_id: Discovery API key id.
        cdp_api_key_secret: Discovery API key secret.
        preferred_networks: Ordered networks to accept, overriding ``network``
            for requirement selection when set.
    """
    model_config = ConfigDict(frozen=True)

    service_url: str = DEFAULT_SERVICE_URL
    network: str = DEFAULT_NETWORK
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    wallet_private_key: Optional[SecretStr] = None
    cdp_api_key_id: Optional[str] = None
    cdp_api_key_secret: Optional[SecretStr] = None
    preferred_networks: Optional[List[str]] = None

    @field_validator("service_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("network")
    @classmethod
    def _known_network(cls, value: str) -> str:
        return _network_name(value)

    @field_validator("preferred_networks")
    @classmethod
    def _known_networks(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if not value:
            return None
        return [_network_name(item) for item in value]

    @field_validator("wallet_private_key")
    @classmethod
    def _hex_prefix(cls, value: Optional[SecretStr]) -> Optional[SecretStr]:
        if value is None or not value.get_secret_value().strip():
            return None
        return SecretStr(normalize_hex_key(value.get_secret_value()))

    @property
    def payment_configured(self) -> bool:
        return self.wallet_private_key is not None

    @property
    def discovery_configured(self) -> bool:
        return bool(self.cdp_api_key_id) and self.cdp_api_key_secret is not None

    @classmethod
    def build(cls, **values) -> "ClientSettings":
        """
        Validate ``values`` into settings.

        Raises:
            ConfigurationError: On an unknown network, non-positive timeout or
                other invalid value.
        """
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid client settings: {problems}") from None

    @classmethod
    def from_env(cls, env_file: Union[str, Path, None] = None) -> "ClientSettings":
        """
        Load settings from the process environment.

        Args:
            env_file: Optional dotenv file; loaded first if it exists. Values
                already in the environment win.

        Raises:
            ConfigurationError: On invalid values.
        """
        if env_file is not None and Path(env_file).exists():
            load_dotenv(dotenv_path=env_file)

        values = {}
        service_url = _first_env("X402_SERVICE_URL")
        if service_url:
            values["service_url"] = service_url
        network = _first_env("X402_NETWORK")
        if network:
            values["network"] = network
        timeout = _first_env("X402_REQUEST_TIMEOUT")
        if timeout:
            values["request_timeout"] = timeout
        preferred = _first_env("X402_PREFERRED_NETWORKS")
        if preferred:
            values["preferred_networks"] = [item.strip() for item in preferred.split(",") if item.strip()]

        values["wallet_private_key"] = _first_env(*WALLET_KEY_VARIABLES)
        values["cdp_api_key_id"] = _first_env("CDP_API_KEY_ID")
        values["cdp_api_key_secret"] = _first_env("CDP_API_KEY_SECRET")
        return cls.build(**values)
