"""
Checkout orchestration: turn a purchase request into a hosted checkout URL.

The service computes the charge, asks the payment gateway for a session and
hands back the redirect URL. It keeps no state of its own; whether the user
actually pays is reported later by the provider webhook.

Failure policy:
  - invalid amount            -> InvalidCheckoutRequest (400), gateway not called
  - provider error or timeout -> GatewayError (500)
  Nothing is retried here. A client that retries gets a fresh session.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

from moviepay.core.config import Settings
from moviepay.core.exceptions import GatewayError, InvalidCheckoutRequest
from moviepay.core.logging import get_logger
from moviepay.core.metrics import gateway_latency, record_checkout_session
from moviepay.infrastructure.payment_gateway import PaymentGateway
from moviepay.services.pricing import is_positive_amount, to_minor_units

logger = get_logger(__name__)

# Stripe substitutes the real session id into this placeholder on redirect
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


@dataclass
class CheckoutSessionResult:
    url: str
    session_id: str


class CheckoutService:

    def __init__(self, gateway: PaymentGateway, settings: Settings):
        self._gateway = gateway
        self._settings = settings

    @property
    def success_url(self) -> str:
        return f"{self._settings.frontend_origin}/success?session_id={SESSION_ID_PLACEHOLDER}"

    @property
    def cancel_url(self) -> str:
        return f"{self._settings.frontend_origin}/cancel"

    def build_line_item(self, amount: float, movie_title: str) -> dict:
        return {
            "price_data": {
                "currency": self._settings.CURRENCY,
                "product_data": {"name": movie_title},
                "unit_amount": to_minor_units(amount),
            },
            "quantity": 1,
        }

    async def create_checkout_session(
        self,
        amount: float,
        movie_title: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> CheckoutSessionResult:
        if not is_positive_amount(amount) or to_minor_units(amount) < 1:
            record_checkout_session("invalid")
            raise InvalidCheckoutRequest("Amount must be a positive number")

        title = (movie_title or "").strip() or self._settings.DEFAULT_MOVIE_TITLE
        metadata = {"movieTitle": title, "amount": str(amount)}
        if user_id:
            metadata["userId"] = user_id

        logger.info(
            "checkout_session_creating",
            movie_title=title,
            amount=amount,
            currency=self._settings.CURRENCY,
            success_url=self.success_url,
        )

        started = time.perf_counter()
        try:
            session = await asyncio.wait_for(
                self._gateway.create_session(
                    line_items=[self.build_line_item(amount, title)],
                    success_url=self.success_url,
                    cancel_url=self.cancel_url,
                    metadata=metadata,
                ),
                timeout=self._settings.GATEWAY_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            record_checkout_session("gateway_error")
            logger.error(
                "checkout_session_timeout",
                timeout_seconds=self._settings.GATEWAY_TIMEOUT_SECONDS,
            )
            raise GatewayError("Payment provider timed out") from e
        except GatewayError as e:
            record_checkout_session("gateway_error")
            logger.error("checkout_session_failed", error=e.message)
            raise
        finally:
            gateway_latency.observe(time.perf_counter() - started)

        record_checkout_session("created")
        logger.info("checkout_session_created", session_id=session.id)
        return CheckoutSessionResult(url=session.url, session_id=session.id)
