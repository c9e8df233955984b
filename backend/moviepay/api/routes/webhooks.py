"""
Payment provider webhook.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from moviepay.api.deps import get_context, get_payment_confirmation_service
from moviepay.core.context import AppContext
from moviepay.schemas.payment import WebhookAck
from moviepay.services.payment_confirmation import PaymentConfirmationService

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])


@router.post("/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None),
    context: AppContext = Depends(get_context),
    confirmations: PaymentConfirmationService = Depends(get_payment_confirmation_service),
):
    """
    Receive checkout events from Stripe.

    The raw body is verified against the signing secret before anything is
    read from it. Failures other than a bad signature return 5xx so Stripe
    redelivers the event.
    """
    payload = await request.body()
    event = context.gateway.verify_webhook(payload, stripe_signature)
    outcome = await confirmations.handle_event(event)
    return WebhookAck(action=outcome.action, booking_id=outcome.booking_id)
