"""
Tests for environment-driven client settings.
"""
import pytest
from pydantic import SecretStr

from silverback_x402.config import ClientSettings, DEFAULT_SERVICE_URL
from silverback_x402.engine.exceptions import ConfigurationError

KEY = "1234567890123456789012345678901234567890123456789012345678901234"

ENV_VARS = [
    "X402_SERVICE_URL", "X402_NETWORK", "X402_REQUEST_TIMEOUT", "X402_PREFERRED_NETWORKS",
    "WALLET_PRIVATE_KEY", "ACP_PRIVATE_KEY", "SWAP_EXECUTOR_PRIVATE_KEY",
    "CDP_API_KEY_ID", "CDP_API_KEY_SECRET",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so teardown also removes values a dotenv file loaded
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestFromEnv:

    def test_defaults(self):
        settings = ClientSettings.from_env()
        assert settings.service_url == DEFAULT_SERVICE_URL
        assert settings.network == "base"
        assert settings.request_timeout == 30
        assert settings.wallet_private_key is None
        assert not settings.payment_configured
        assert not settings.discovery_configured

    def test_reads_variables(self, monkeypatch):
        monkeypatch.setenv("X402_SERVICE_URL", "https://gate.example/")
        monkeypatch.setenv("X402_NETWORK", "base-sepolia")
        monkeypatch.setenv("X402_REQUEST_TIMEOUT", "12.5")
        monkeypatch.setenv("WALLET_PRIVATE_KEY", KEY)
        monkeypatch.setenv("CDP_API_KEY_ID", "kid")
        monkeypatch.setenv("CDP_API_KEY_SECRET", "pem")
        settings = ClientSettings.from_env()
        assert settings.service_url == "https://gate.example"
        assert settings.network == "base-sepolia"
        assert settings.request_timeout == 12.5
        assert settings.wallet_private_key.get_secret_value() == "0x" + KEY
        assert settings.discovery_configured

    @pytest.mark.parametrize("variable", ["ACP_PRIVATE_KEY", "SWAP_EXECUTOR_PRIVATE_KEY"])
    def test_wallet_key_fallbacks(self, monkeypatch, variable):
        monkeypatch.setenv(variable, "0x" + KEY)
        assert ClientSettings.from_env().wallet_private_key.get_secret_value() == "0x" + KEY

    def test_primary_key_wins(self, monkeypatch):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "0x" + "a" * 64)
        monkeypatch.setenv("ACP_PRIVATE_KEY", "0x" + "b" * 64)
        assert ClientSettings.from_env().wallet_private_key.get_secret_value() == "0x" + "a" * 64

    def test_blank_primary_falls_through(self, monkeypatch):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", "  ")
        monkeypatch.setenv("SWAP_EXECUTOR_PRIVATE_KEY", KEY)
        assert ClientSettings.from_env().payment_configured

    def test_preferred_networks(self, monkeypatch):
        monkeypatch.setenv("X402_PREFERRED_NETWORKS", "base-sepolia, eip155:8453")
        assert ClientSettings.from_env().preferred_networks == ["base-sepolia", "base"]

    def test_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(f"X402_NETWORK=base-sepolia\nWALLET_PRIVATE_KEY={KEY}\n")
        settings = ClientSettings.from_env(env_file)
        assert settings.network == "base-sepolia"
        assert settings.payment_configured

    def test_missing_env_file_is_ignored(self, tmp_path):
        assert ClientSettings.from_env(tmp_path / "absent.env").network == "base"

    @pytest.mark.parametrize("variable, value", [
        ("X402_NETWORK", "ethereum"),
        ("X402_REQUEST_TIMEOUT", "0"),
        ("X402_REQUEST_TIMEOUT", "soon"),
        ("X402_PREFERRED_NETWORKS", "base,polygon"),
    ])
    def test_invalid_values(self, monkeypatch, variable, value):
        monkeypatch.setenv(variable, value)
        with pytest.raises(ConfigurationError):
            ClientSettings.from_env()


class TestSecrecy:

    def test_repr_redacts_secrets(self):
        settings = ClientSettings(wallet_private_key=SecretStr(KEY), cdp_api_key_secret=SecretStr("pem-body"))
        text = repr(settings) + str(settings) + settings.model_dump_json()
        assert KEY not in text
        assert "pem-body" not in text

    def test_invalid_value_error_does_not_echo_secrets(self):
        with pytest.raises(ConfigurationError) as info:
            ClientSettings.build(wallet_private_key=KEY, network="nowhere")
        assert KEY not in str(info.value)
