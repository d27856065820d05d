"""
Shared test fixtures.

Provides deterministic key material and a scriptable fake payment gate.
Nothing here touches the network: servers are ``httpx.MockTransport``
handlers or FastAPI apps mounted through ``httpx.ASGITransport``.

Key Components:
    - Test wallet key and derived payer address
    - P-256 key pair for discovery tokens
    - ``FakeGate``: MockTransport handler that answers 402 until paid
    - ``payment_gate_app``: FastAPI app with free and gated routes
"""

import base64
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_account import Account
from eth_account.messages import encode_typed_data
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from silverback_x402.signers.evm.schemas import TransferTypedData
from silverback_x402.signers.hub import SignerHub

# Test private keys (do not use in production!)
WALLET_PRIVATE_KEY = "0x1234567890123456789012345678901234567890123456789012345678901234"
WALLET_ADDRESS = Account.from_key(WALLET_PRIVATE_KEY).address

PAY_TO = "0x209693Bc6afc0C5328bA36FaF03C514EF312287C"
BASE_USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
BASE_SEPOLIA_USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
SERVICE_URL = "https://x402.test"


def make_requirement(
    network: str = "base",
    amount: str = "20000",
    resource: Optional[str] = None,
    **extra_fields: Any,
) -> Dict[str, Any]:
    """Wire-format requirement dict as a server would send it."""
    requirement = {
        "scheme": "exact",
        "network": network,
        "maxAmountRequired": amount,
        "payTo": PAY_TO,
        "asset": BASE_USDC if network == "base" else BASE_SEPOLIA_USDC,
        "maxTimeoutSeconds": 60,
        "mimeType": "application/json",
        "description": "Silverback API call",
    }
    if resource is not None:
        requirement["resource"] = resource
    requirement.update(extra_fields)
    return requirement


def envelope(requirements: List[Dict[str, Any]], error: str = "X-PAYMENT header is required") -> Dict[str, Any]:
    return {"x402Version": 1, "error": error, "accepts": requirements}


def b64json(value: Any) -> str:
    return base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")


def decode_payment_header(value: str) -> Dict[str, Any]:
    return json.loads(base64.b64decode(value))


def recover_payer(payment: Dict[str, Any], chain_id: int = 8453, domain_name: str = "USD Coin") -> str:
    """Recover the address that signed an ``X-PAYMENT`` payload."""
    authorization = payment["payload"]["authorization"]
    typed = TransferTypedData(
        domain_name=domain_name,
        domain_version="2",
        chain_id=chain_id,
        verifying_contract=payment["accepted"].get("asset", BASE_USDC),
        authorizer=authorization["from"],
        recipient=authorization["to"],
        value=int(authorization["value"]),
        valid_after=int(authorization["validAfter"]),
        valid_before=int(authorization["validBefore"]),
        nonce=authorization["nonce"],
    )
    message = encode_typed_data(full_message=typed.to_typed_data())
    return Account.recover_message(message, signature=payment["payload"]["signature"])


class FakeGate:
    """
    Scriptable ``httpx.MockTransport`` handler.

    Answers 402 with ``requirements`` (in the body, a header, or both) until a
    request carries ``X-PAYMENT``; paid requests get ``paid_status``.

    Attributes:
        requests: Every request received, in order.
    """

    def __init__(
        self,
        requirements: Optional[List[Dict[str, Any]]] = None,
        *,
        deliver: str = "body",
        free: bool = False,
        paid_status: int = 200,
        paid_body: Any = None,
        receipt: Optional[str] = None,
        first_status: Optional[int] = None,
        first_body: Any = None,
    ):
        self.requirements = requirements if requirements is not None else [make_requirement()]
        self.deliver = deliver
        self.free = free
        self.paid_status = paid_status
        self.paid_body = paid_body if paid_body is not None else {"success": True, "amountOut": "3150.12"}
        self.receipt = receipt
        self.first_status = first_status
        self.first_body = first_body
        self.requests: List[httpx.Request] = []

    @property
    def paid_requests(self) -> List[httpx.Request]:
        return [request for request in self.requests if "X-PAYMENT" in request.headers]

    def _payment_required(self) -> httpx.Response:
        headers = {}
        body: Any = {"error": "Payment required"}
        if self.deliver in ("header", "both"):
            headers["PAYMENT-REQUIRED"] = b64json(envelope(self.requirements))
        if self.deliver in ("body", "both"):
            body = envelope(self.requirements)
        return httpx.Response(402, json=body, headers=headers)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.first_status is not None and len(self.requests) == 1:
            return httpx.Response(self.first_status, json=self.first_body)
        if self.free:
            return httpx.Response(200, json={"success": True, "free": True})
        if "X-PAYMENT" not in request.headers:
            return self._payment_required()
        if self.paid_status == 402:
            return self._payment_required()
        headers = {"X-PAYMENT-RESPONSE": self.receipt} if self.receipt else {}
        return httpx.Response(self.paid_status, json=self.paid_body, headers=headers)


@pytest.fixture
def wallet_key() -> str:
    return WALLET_PRIVATE_KEY


@pytest.fixture
def signer_hub() -> SignerHub:
    return SignerHub(evm_private_key=WALLET_PRIVATE_KEY)


@pytest.fixture
def gate_client() -> Callable[..., httpx.AsyncClient]:
    """Factory: plain AsyncClient routed to a handler."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=SERVICE_URL)

    return build


@pytest.fixture
def p256_key_pem() -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture
def payment_gate_app() -> FastAPI:
    """
    FastAPI stand-in for the Silverback API.

    ``/health`` and ``/api/v1/pricing`` are free; every other route answers
    402 with a base mainnet requirement for its own wire (still
    percent-encoded) path until paid.
    ``app.state.calls`` records (method, path, query, json body, paid).
    """
    app = FastAPI()
    app.state.calls = []

    free_paths = {"/health", "/api/v1/pricing"}

    @app.api_route("/{path:path}", methods=["GET", "POST"])
    async def gate(path: str, request: Request):
        full_path = "/" + path
        wire_path = request.scope.get("raw_path", full_path.encode("ascii")).split(b"?", 1)[0].decode("ascii")
        raw = await request.body()
        payment = request.headers.get("X-PAYMENT")
        app.state.calls.append({
            "method": request.method,
            "path": full_path,
            "query": dict(request.query_params),
            "json": json.loads(raw) if raw else None,
            "payment": decode_payment_header(payment) if payment else None,
        })
        if full_path in free_paths:
            return {"status": "ok", "path": full_path}
        if payment is None:
            return JSONResponse(
                status_code=402,
                content=envelope([make_requirement(amount="10000", resource=wire_path)]),
            )
        receipt = b64json({
            "success": True,
            "transaction": "0x" + "ab" * 32,
            "network": "base",
            "payer": decode_payment_header(payment)["payload"]["authorization"]["from"],
        })
        return JSONResponse(
            content={"success": True, "path": full_path},
            headers={"X-PAYMENT-RESPONSE": receipt},
        )

    return app
