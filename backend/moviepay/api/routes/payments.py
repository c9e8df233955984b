"""
Checkout endpoint: starts a hosted payment session for a ticket.
"""

from fastapi import APIRouter, Depends

from moviepay.api.deps import get_checkout_service
from moviepay.schemas.payment import CheckoutRequest, CheckoutResponse
from moviepay.services.checkout_service import CheckoutService

router = APIRouter(tags=["Payments"])


@router.post("/payment", response_model=CheckoutResponse)
async def create_payment(
    payload: CheckoutRequest,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """
    Create a checkout session and return the URL to redirect the user to.

    Pass `userId` so the payment webhook can record the booking once the
    provider confirms payment.
    """
    result = await checkout.create_checkout_session(
        amount=payload.amount,
        movie_title=payload.movie_title,
        user_id=payload.user_id,
    )
    return CheckoutResponse(url=result.url, session_id=result.session_id)
