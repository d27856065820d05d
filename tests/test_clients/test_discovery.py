"""
Tests for the discovery catalog client.

The catalog is a MockTransport handler; bearer tokens are verified with
PyJWT against the public half of the test key.
"""
import httpx
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from pydantic import SecretStr

from silverback_x402.clients.discovery import DiscoveryClient, resources_of
from silverback_x402.config import ClientSettings, WALLET_KEY_VARIABLES
from silverback_x402.engine.exceptions import ConfigurationError, RequestFailedError
from silverback_x402.engine.results import FailureKind

LISTING = {
    "resources": [
        {"url": "https://other.example/api/data", "type": "http"},
        {"url": "https://x402.silverbackdefi.app/api/v1/swap-quote", "type": "http"},
    ],
    "total": 2,
}


class Catalog:
    def __init__(self, status=200, body=None):
        self.status = status
        self.body = LISTING if body is None else body
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


def _discovery(catalog, pem, key_id="key-123"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(catalog))
    return DiscoveryClient(key_id, pem, http=http), http


class TestListResources:

    @pytest.mark.asyncio
    async def test_single_authenticated_get(self, p256_key_pem):
        catalog = Catalog()
        discovery, http = _discovery(catalog, p256_key_pem)
        async with http:
            result = await discovery.list_resources()

        assert result.ok
        assert result.json() == LISTING
        assert len(catalog.requests) == 1

        request = catalog.requests[0]
        assert request.method == "GET"
        assert request.url.host == "api.cdp.coinbase.com"
        assert request.url.path == "/platform/v2/x402/discovery/resources"
        assert dict(request.url.params) == {"type": "http", "limit": "50"}

        scheme, token = request.headers["Authorization"].split(" ", 1)
        assert scheme == "Bearer"
        public_key = serialization.load_pem_private_key(p256_key_pem.encode(), None).public_key()
        claims = jwt.decode(token, public_key, algorithms=["ES256"])
        assert claims["uris"] == ["GET api.cdp.coinbase.com/platform/v2/x402/discovery/resources"]
        assert claims["sub"] == "key-123"
        assert jwt.get_unverified_header(token)["kid"] == "key-123"

    @pytest.mark.asyncio
    async def test_fresh_token_per_call(self, p256_key_pem):
        catalog = Catalog()
        discovery, http = _discovery(catalog, p256_key_pem)
        async with http:
            await discovery.list_resources()
            await discovery.list_resources(limit=10)
        first, second = (r.headers["Authorization"] for r in catalog.requests)
        assert first != second
        assert catalog.requests[1].url.params["limit"] == "10"

    @pytest.mark.asyncio
    async def test_missing_credentials_sends_nothing(self):
        catalog = Catalog()
        http = httpx.AsyncClient(transport=httpx.MockTransport(catalog))
        async with http:
            result = await DiscoveryClient(None, None, http=http).list_resources()
        assert result.kind is FailureKind.CONFIGURATION
        assert isinstance(result.error, ConfigurationError)
        assert catalog.requests == []

    @pytest.mark.asyncio
    async def test_error_status_is_not_retried(self, p256_key_pem):
        catalog = Catalog(status=401, body={"errorMessage": "unauthorized"})
        discovery, http = _discovery(catalog, p256_key_pem)
        async with http:
            result = await discovery.list_resources()
        assert result.kind is FailureKind.REQUEST_FAILED
        assert result.error.payload == {"errorMessage": "unauthorized"}
        assert len(catalog.requests) == 1

    @pytest.mark.asyncio
    async def test_402_is_not_paid(self, p256_key_pem):
        catalog = Catalog(status=402, body={"accepts": []})
        discovery, http = _discovery(catalog, p256_key_pem)
        async with http:
            result = await discovery.list_resources()
        assert result.kind is FailureKind.REQUEST_FAILED
        assert len(catalog.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_failure(self, p256_key_pem):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        discovery, http = _discovery(handler, p256_key_pem)
        async with http:
            result = await discovery.list_resources()
        assert result.kind is FailureKind.NETWORK

    @pytest.mark.asyncio
    async def test_undecodable_body_is_a_network_failure(self, p256_key_pem):
        def handler(request):
            return httpx.Response(200, content=b"not gzip at all", headers={"Content-Encoding": "gzip"})

        discovery, http = _discovery(handler, p256_key_pem)
        async with http:
            result = await discovery.list_resources()
        assert result.kind is FailureKind.NETWORK
        assert isinstance(result.error.__cause__, httpx.DecodingError)


class TestFindResource:

    @pytest.mark.asyncio
    async def test_finds_first_match(self, p256_key_pem):
        discovery, http = _discovery(Catalog(), p256_key_pem)
        async with http:
            found = await discovery.find_resource("silverback")
        assert found["url"].endswith("/api/v1/swap-quote")

    @pytest.mark.asyncio
    async def test_no_match(self, p256_key_pem):
        discovery, http = _discovery(Catalog(), p256_key_pem)
        async with http:
            assert await discovery.find_resource("nothing-here") is None

    @pytest.mark.asyncio
    async def test_failure_raises(self, p256_key_pem):
        discovery, http = _discovery(Catalog(status=500, body={"error": "x"}), p256_key_pem)
        async with http:
            with pytest.raises(RequestFailedError):
                await discovery.find_resource("silverback")


class TestFromSettings:

    @pytest.mark.asyncio
    async def test_key_pair_from_settings(self, p256_key_pem):
        catalog = Catalog()
        settings = ClientSettings(cdp_api_key_id="key-456", cdp_api_key_secret=SecretStr(p256_key_pem))
        http = httpx.AsyncClient(transport=httpx.MockTransport(catalog))
        async with http:
            result = await DiscoveryClient.from_settings(settings, http=http).list_resources()

        assert result.ok
        token = catalog.requests[0].headers["Authorization"].split(" ", 1)[1]
        assert jwt.get_unverified_header(token)["kid"] == "key-456"

    @pytest.mark.asyncio
    async def test_settings_without_key_pair_sends_nothing(self):
        catalog = Catalog()
        settings = ClientSettings(cdp_api_key_id="key-456")
        assert not settings.discovery_configured
        http = httpx.AsyncClient(transport=httpx.MockTransport(catalog))
        async with http:
            result = await DiscoveryClient.from_settings(settings, http=http).list_resources()

        assert result.kind is FailureKind.CONFIGURATION
        assert catalog.requests == []

    @pytest.mark.asyncio
    async def test_from_env(self, monkeypatch, p256_key_pem):
        for name in ("X402_SERVICE_URL", "X402_NETWORK", "X402_REQUEST_TIMEOUT", "X402_PREFERRED_NETWORKS", *WALLET_KEY_VARIABLES):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("CDP_API_KEY_ID", "key-env")
        monkeypatch.setenv("CDP_API_KEY_SECRET", p256_key_pem)
        catalog = Catalog()
        http = httpx.AsyncClient(transport=httpx.MockTransport(catalog))
        async with http:
            result = await DiscoveryClient.from_env(http=http).list_resources()

        assert result.ok
        token = catalog.requests[0].headers["Authorization"].split(" ", 1)[1]
        assert jwt.decode(token, options={"verify_signature": False})["sub"] == "key-env"


def test_resources_of_items_shape():
    assert resources_of({"items": [{"url": "a"}, "junk"]}) == [{"url": "a"}]
    assert resources_of([]) == []
