"""
Server-to-server payment confirmation.

The provider calls the webhook once a checkout session is paid. The booking is
recorded from the session itself, keyed by the session id, so a redelivered
event or a client that also posts to /api/bookings with the same session id
lands on the same row.
"""

from dataclasses import dataclass
from typing import Any, Optional

from moviepay.core.logging import get_logger
from moviepay.core.metrics import record_webhook_event
from moviepay.services.booking_service import BookingService
from moviepay.services.pricing import from_minor_units

logger = get_logger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"


@dataclass
class WebhookOutcome:
    event_type: str
    action: str  # booked, replayed, ignored
    booking_id: Optional[str] = None


class PaymentConfirmationService:

    def __init__(self, bookings: BookingService, default_movie_title: str):
        self._bookings = bookings
        self._default_movie_title = default_movie_title

    async def handle_event(self, event: dict[str, Any]) -> WebhookOutcome:
        event_type = event.get("type", "")
        data = event.get("data")
        session = data.get("object") if isinstance(data, dict) else None
        if not isinstance(session, dict):
            session = {}

        if event_type == SESSION_COMPLETED and session.get("payment_status") != "paid":
            # Delayed payment methods complete later via async_payment_succeeded
            return self._ignored(event_type, session, "payment_pending")
        if event_type not in (SESSION_COMPLETED, ASYNC_PAYMENT_SUCCEEDED):
            return self._ignored(event_type, session, "unhandled_event")

        metadata = session.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        user_id = metadata.get("userId")
        if not user_id:
            return self._ignored(event_type, session, "missing_user")

        amount_total = session.get("amount_total")
        amount = from_minor_units(amount_total) if amount_total else None
        movie_title = metadata.get("movieTitle") or self._default_movie_title

        result = await self._bookings.record_booking(
            user_id=user_id,
            movie_title=movie_title,
            amount=amount,
            checkout_session_id=session.get("id"),
        )

        action = "booked" if result.created else "replayed"
        record_webhook_event(event_type, action)
        logger.info(
            "payment_confirmed",
            event_id=event.get("id"),
            session_id=session.get("id"),
            booking_id=result.booking.id,
            action=action,
        )
        return WebhookOutcome(event_type=event_type, action=action, booking_id=result.booking.id)

    def _ignored(self, event_type: str, session: dict, reason: str) -> WebhookOutcome:
        record_webhook_event(event_type, "ignored")
        logger.info("webhook_event_ignored", event_type=event_type, session_id=session.get("id"), reason=reason)
        return WebhookOutcome(event_type=event_type, action="ignored")
