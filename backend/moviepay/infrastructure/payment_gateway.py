"""
Payment gateway clients for hosted checkout.

StripeGateway talks to Stripe Checkout. StubGateway returns predictable
identifiers without touching the network, so local development and tests can
exercise the full checkout flow with no Stripe account.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional
from uuid import uuid4

import stripe
from starlette.concurrency import run_in_threadpool

from moviepay.core.exceptions import ConfigurationError, GatewayError, WebhookVerificationError
from moviepay.core.logging import get_logger

logger = get_logger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


@dataclass
class CheckoutSession:
    """The subset of a provider checkout session the service relies on."""

    id: str
    url: str
    payment_status: str = "unpaid"


class PaymentGateway(ABC):
    """
    Hosted-checkout provider interface.

    create_session raises GatewayError on any provider failure.
    verify_webhook raises WebhookVerificationError on a bad payload or
    signature and ConfigurationError when no signing secret is set.
    """

    provider: str = "stripe"

    def __init__(self, webhook_secret: str = ""):
        self._webhook_secret = webhook_secret

    @abstractmethod
    async def create_session(
        self,
        line_items: list[dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> CheckoutSession:
        pass

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> dict[str, Any]:
        if not self._webhook_secret:
            logger.error("webhook_secret_missing")
            raise ConfigurationError("Webhook secret not configured")
        if not signature:
            raise WebhookVerificationError("Missing webhook signature")

        try:
            text = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                text, signature, self._webhook_secret, WEBHOOK_TOLERANCE_SECONDS
            )
            event = json.loads(text)
        except stripe.SignatureVerificationError as e:
            logger.warning("webhook_signature_invalid", error=str(e))
            raise WebhookVerificationError("Invalid webhook signature") from e
        except ValueError as e:
            logger.warning("webhook_payload_invalid", error=str(e))
            raise WebhookVerificationError("Invalid webhook payload") from e

        if not isinstance(event, dict) or "type" not in event:
            raise WebhookVerificationError("Invalid webhook payload")
        return event


class StripeGateway(PaymentGateway):
    """Stripe Checkout client. The API key is passed per call, never set globally."""

    def __init__(self, api_key: str, webhook_secret: str = ""):
        super().__init__(webhook_secret)
        if not api_key:
            raise ConfigurationError("Stripe secret key is not configured")
        self._api_key = api_key

    async def create_session(self, line_items, success_url, cancel_url, metadata=None):
        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if metadata:
            params["metadata"] = metadata

        try:
            # stripe-python is blocking; keep it off the event loop
            session = await run_in_threadpool(
                stripe.checkout.Session.create, api_key=self._api_key, **params
            )
        except stripe.StripeError as e:
            logger.error(
                "stripe_session_failed",
                error=e.user_message or str(e),
                code=e.code,
                http_status=e.http_status,
            )
            raise GatewayError(e.user_message or str(e)) from e

        return CheckoutSession(
            id=session.id,
            url=session.url,
            payment_status=session.payment_status or "unpaid",
        )


class StubGateway(PaymentGateway):
    provider = "stub"

    def __init__(self, checkout_base_url: str, webhook_secret: str = ""):
        super().__init__(webhook_secret)
        self._checkout_base_url = checkout_base_url.rstrip("/")

    async def create_session(self, line_items, success_url, cancel_url, metadata=None):
        if not line_items:
            raise GatewayError("Checkout session requires at least one line item")
        session_id = f"cs_test_{uuid4().hex}"
        logger.debug("stub_session_created", session_id=session_id)
        return CheckoutSession(id=session_id, url=f"{self._checkout_base_url}/{session_id}")
