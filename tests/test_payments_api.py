import hashlib
import hmac
import logging
import re
from unittest.mock import AsyncMock

import httpx
from fastapi.testclient import TestClient

from orderdesk.api.v1.routers.payments import get_payment_order_service, get_signature_verifier
from orderdesk.main import app
from orderdesk.services.payments import GatewayError, PaymentOrderService, SignatureVerifier
from orderdesk.services.payments.mock import MockPayments
from orderdesk.services.payments.razorpay_gateway import RazorpayGateway

from conftest import TEST_KEY_ID, TEST_KEY_SECRET

CREATE_URL = "/api/v1/orders/orders"
VERIFY_URL = "/api/v1/orders/verify"


def _sign(order_id: str, payment_id: str, secret: str = TEST_KEY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


# ---------------------------------------------------------------------------
# POST /orders
# ---------------------------------------------------------------------------

def test_create_payment_order_with_mock_provider(client):
    r = client.post(CREATE_URL, json={"amount": 499.5})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["id"].startswith("order_")
    assert data["amount"] == 49950
    assert data["currency"] == "INR"
    assert re.fullmatch(r"[0-9a-f]{20}", data["receipt"])


def test_create_payment_order_returns_gateway_record_verbatim(client):
    gateway_order = {"id": "order_XYZ", "amount": 1000, "currency": "INR", "notes": [], "offer_id": None}
    provider = AsyncMock()
    provider.create_order.return_value = gateway_order
    app.dependency_overrides[get_payment_order_service] = lambda: PaymentOrderService(provider, currency="INR")

    r = client.post(CREATE_URL, json={"amount": "10"})

    assert r.status_code == 200
    assert r.json() == {"data": gateway_order}
    assert provider.create_order.await_args.args[0]["amount"] == 1000


def test_create_payment_order_gateway_failure_is_generic_500(client):
    provider = AsyncMock()
    provider.create_order.side_effect = GatewayError(
        f"auth failed for {TEST_KEY_ID}:{TEST_KEY_SECRET}", status_code=401
    )
    app.dependency_overrides[get_payment_order_service] = lambda: PaymentOrderService(provider)

    r = client.post(CREATE_URL, json={"amount": 10})

    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong!"}
    assert TEST_KEY_ID not in r.text
    assert TEST_KEY_SECRET not in r.text


def test_create_payment_order_gateway_http_error_through_razorpay_client(client, caplog):
    caplog.set_level(logging.DEBUG)

    def handler(request):
        return httpx.Response(401, json={"error": {"description": "Authentication failed"}})

    gateway = RazorpayGateway(
        key_id=TEST_KEY_ID,
        key_secret=TEST_KEY_SECRET,
        base_url="https://api.razorpay.test",
        transport=httpx.MockTransport(handler),
    )
    app.dependency_overrides[get_payment_order_service] = lambda: PaymentOrderService(gateway)

    r = client.post(CREATE_URL, json={"amount": 10})

    assert r.status_code == 500
    assert r.json() == {"message": "Something went wrong!"}
    assert "Authentication failed" not in r.text
    assert TEST_KEY_SECRET not in r.text
    assert "Authentication failed" in caplog.text
    assert TEST_KEY_ID not in caplog.text
    assert TEST_KEY_SECRET not in caplog.text


def test_create_payment_order_unexpected_failure_is_server_error(client):
    provider = AsyncMock()
    provider.create_order.side_effect = RuntimeError("driver exploded")
    app.dependency_overrides[get_payment_order_service] = lambda: PaymentOrderService(provider)

    r = client.post(CREATE_URL, json={"amount": 10})

    assert r.status_code == 500
    assert r.json() == {"message": "Server error!"}


def test_create_payment_order_rejects_non_positive_amount(client):
    r = client.post(CREATE_URL, json={"amount": 0})
    assert r.status_code == 400
    assert "message" in r.json()


def test_create_payment_order_rejects_missing_amount(client):
    r = client.post(CREATE_URL, json={})
    assert r.status_code == 400
    assert "amount" in r.json()["message"]


def test_create_payment_order_rejects_amount_too_large(client):
    provider = AsyncMock()
    app.dependency_overrides[get_payment_order_service] = lambda: PaymentOrderService(provider)

    r = client.post(CREATE_URL, json={"amount": "1e30"})

    assert r.status_code == 400
    assert r.json() == {"message": "amount is too large"}
    provider.create_order.assert_not_awaited()


def test_payments_provider_lives_for_the_whole_app():
    with TestClient(app) as c:
        assert isinstance(app.state.payments_provider, MockPayments)

        stub = AsyncMock()
        stub.create_order.return_value = {"id": "order_1"}
        app.state.payments_provider = stub

        assert c.post(CREATE_URL, json={"amount": 10}).status_code == 200
        assert c.post(CREATE_URL, json={"amount": 20}).status_code == 200
        assert stub.create_order.await_count == 2
        stub.aclose.assert_not_awaited()

    stub.aclose.assert_awaited_once()


# ---------------------------------------------------------------------------
# POST /verify
# ---------------------------------------------------------------------------

def test_verify_valid_signature(client):
    body = {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": _sign("order_1", "pay_1"),
    }
    r = client.post(VERIFY_URL, json=body)
    assert r.status_code == 200
    assert r.json() == {"success": True, "order_id": "order_1"}


def test_verify_same_payload_twice_succeeds_both_times(client):
    body = {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": _sign("order_1", "pay_1"),
    }
    assert client.post(VERIFY_URL, json=body).status_code == 200
    assert client.post(VERIFY_URL, json=body).status_code == 200


def test_verify_invalid_signature(client):
    body = {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": "deadbeef",
    }
    r = client.post(VERIFY_URL, json=body)
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid signature"}
    # expected signature never leaks
    assert _sign("order_1", "pay_1") not in r.text


def test_verify_missing_field_is_client_error(client):
    r = client.post(VERIFY_URL, json={"razorpay_order_id": "order_1", "razorpay_signature": "anything"})
    assert r.status_code == 400
    assert r.json() == {"message": "Missing payment verification fields"}


def test_verify_uses_injected_secret(client):
    app.dependency_overrides[get_signature_verifier] = lambda: SignatureVerifier("fake-secret")
    body = {
        "razorpay_order_id": "order_9",
        "razorpay_payment_id": "pay_9",
        "razorpay_signature": _sign("order_9", "pay_9", secret="fake-secret"),
    }
    r = client.post(VERIFY_URL, json=body)
    assert r.status_code == 200
    assert r.json()["order_id"] == "order_9"


def test_verify_without_configured_secret_is_server_error(client):
    app.dependency_overrides[get_signature_verifier] = lambda: SignatureVerifier(None)
    body = {
        "razorpay_order_id": "order_1",
        "razorpay_payment_id": "pay_1",
        "razorpay_signature": "deadbeef",
    }
    r = client.post(VERIFY_URL, json=body)
    assert r.status_code == 500
    assert r.json() == {"message": "Server error!"}
