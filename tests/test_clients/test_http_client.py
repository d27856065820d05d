"""
Tests for Http402Client, the httpx.AsyncClient subclass.
"""
import httpx
import pytest

from silverback_x402.clients import Http402Client
from silverback_x402.engine.results import FailureKind
from silverback_x402.signers import ExactEvmSigner, PrivateKeyHandle, SignerHub

from conftest import SERVICE_URL, WALLET_ADDRESS, WALLET_PRIVATE_KEY, FakeGate, decode_payment_header


class TestHttp402Client:

    @pytest.mark.asyncio
    async def test_negotiate_pays(self):
        gate = FakeGate()
        async with Http402Client(
            SignerHub(evm_private_key=WALLET_PRIVATE_KEY),
            transport=httpx.MockTransport(gate),
            base_url=SERVICE_URL,
        ) as client:
            result = await client.negotiate("get", "/api/v1/top-coins", params={"limit": 5})
        assert result.ok and result.paid
        assert gate.requests[1].url.params["limit"] == "5"
        assert decode_payment_header(gate.requests[1].headers["X-PAYMENT"])["resource"] == "/api/v1/top-coins"

    @pytest.mark.asyncio
    async def test_plain_requests_keep_httpx_behaviour(self):
        gate = FakeGate()
        async with Http402Client(
            SignerHub(evm_private_key=WALLET_PRIVATE_KEY),
            transport=httpx.MockTransport(gate),
            base_url=SERVICE_URL,
        ) as client:
            response = await client.get("/api/v1/top-coins")
        assert response.status_code == 402
        assert len(gate.requests) == 1

    @pytest.mark.asyncio
    async def test_add_payment_signer(self):
        gate = FakeGate()
        async with Http402Client(transport=httpx.MockTransport(gate), base_url=SERVICE_URL) as client:
            unpaid = await client.negotiate("GET", "/api/v1/dex-metrics")
            client.add_payment_signer(ExactEvmSigner(PrivateKeyHandle(WALLET_PRIVATE_KEY)))
            paid = await client.negotiate("GET", "/api/v1/dex-metrics")
        assert unpaid.kind is FailureKind.PAYMENT_NOT_CONFIGURED
        assert paid.ok
        assert client.signer_hub.wallet_addresses() == {"evm": WALLET_ADDRESS}

    @pytest.mark.asyncio
    async def test_client_timeout_is_network_failure(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        async with Http402Client(transport=httpx.MockTransport(handler), base_url=SERVICE_URL) as client:
            result = await client.negotiate("GET", "/health")
        assert result.kind is FailureKind.NETWORK
