"""
Tests for the Stripe and stub gateway clients and webhook verification.
"""

import hashlib
import hmac
import json
import time
import types
from typing import Optional

import pytest
import stripe

from moviepay.core.exceptions import ConfigurationError, GatewayError, WebhookVerificationError
from moviepay.infrastructure.payment_gateway import StripeGateway, StubGateway
from tests.conftest import WEBHOOK_SECRET

LINE_ITEMS = [
    {
        "price_data": {"currency": "inr", "product_data": {"name": "Dune"}, "unit_amount": 25000},
        "quantity": 1,
    }
]


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    timestamp = timestamp or int(time.time())
    digest = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


@pytest.mark.asyncio
async def test_stripe_session_created_with_per_call_key(monkeypatch):
    captured = {}
    original_api_key = stripe.api_key

    def fake_create(**kwargs):
        captured["kwargs"] = kwargs
        return types.SimpleNamespace(
            id="cs_real_123",
            url="https://checkout.stripe.com/c/pay/cs_real_123",
            payment_status="unpaid",
        )

    monkeypatch.setattr(stripe.checkout.Session, "create", staticmethod(fake_create))

    gateway = StripeGateway("sk_test_123", WEBHOOK_SECRET)
    session = await gateway.create_session(
        LINE_ITEMS,
        "https://movies.test/success",
        "https://movies.test/cancel",
        metadata={"userId": "u1"},
    )

    assert session.id == "cs_real_123"
    assert session.url.startswith("https://checkout.stripe.com/")
    kwargs = captured["kwargs"]
    assert kwargs["api_key"] == "sk_test_123"
    assert kwargs["mode"] == "payment"
    assert kwargs["payment_method_types"] == ["card"]
    assert kwargs["line_items"] == LINE_ITEMS
    assert kwargs["success_url"] == "https://movies.test/success"
    assert kwargs["cancel_url"] == "https://movies.test/cancel"
    assert kwargs["metadata"] == {"userId": "u1"}
    # The global key is never touched
    assert stripe.api_key == original_api_key


@pytest.mark.asyncio
async def test_stripe_error_becomes_gateway_error(monkeypatch):
    def fake_create(**kwargs):
        raise stripe.APIConnectionError("Network error talking to Stripe")

    monkeypatch.setattr(stripe.checkout.Session, "create", staticmethod(fake_create))

    gateway = StripeGateway("sk_test_123")
    with pytest.raises(GatewayError, match="Network error"):
        await gateway.create_session(LINE_ITEMS, "https://a/success", "https://a/cancel")


def test_stripe_gateway_requires_key():
    with pytest.raises(ConfigurationError):
        StripeGateway("")


@pytest.mark.asyncio
async def test_stub_session_is_predictable():
    gateway = StubGateway("https://checkout.stripe.com/c/pay/")
    session = await gateway.create_session(LINE_ITEMS, "https://a/success", "https://a/cancel")

    assert session.id.startswith("cs_test_")
    assert session.url == f"https://checkout.stripe.com/c/pay/{session.id}"
    assert session.payment_status == "unpaid"


def test_verify_webhook_returns_event():
    payload = json.dumps({"id": "evt_1", "type": "checkout.session.completed", "data": {"object": {}}})
    gateway = StubGateway("https://checkout.stripe.com/c/pay", WEBHOOK_SECRET)

    event = gateway.verify_webhook(payload.encode(), sign(payload))
    assert event["id"] == "evt_1"


def test_verify_webhook_rejects_bad_signature():
    payload = json.dumps({"id": "evt_1", "type": "checkout.session.completed"})
    gateway = StubGateway("https://checkout.stripe.com/c/pay", WEBHOOK_SECRET)

    with pytest.raises(WebhookVerificationError):
        gateway.verify_webhook(payload.encode(), sign(payload, secret="whsec_other"))


def test_verify_webhook_rejects_stale_signature():
    payload = json.dumps({"id": "evt_1", "type": "checkout.session.completed"})
    gateway = StubGateway("https://checkout.stripe.com/c/pay", WEBHOOK_SECRET)

    with pytest.raises(WebhookVerificationError):
        gateway.verify_webhook(payload.encode(), sign(payload, timestamp=int(time.time()) - 3600))


def test_verify_webhook_rejects_missing_signature():
    gateway = StubGateway("https://checkout.stripe.com/c/pay", WEBHOOK_SECRET)
    with pytest.raises(WebhookVerificationError):
        gateway.verify_webhook(b"{}", None)


def test_verify_webhook_rejects_non_json():
    gateway = StubGateway("https://checkout.stripe.com/c/pay", WEBHOOK_SECRET)
    with pytest.raises(WebhookVerificationError):
        gateway.verify_webhook(b"not json", sign("not json"))


def test_verify_webhook_without_secret_is_configuration_error():
    gateway = StubGateway("https://checkout.stripe.com/c/pay")
    with pytest.raises(ConfigurationError):
        gateway.verify_webhook(b"{}", sign("{}"))
