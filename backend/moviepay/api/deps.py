"""
Request dependencies that hand services their collaborators from the
application context built at startup.
"""

from fastapi import Depends, Request

from moviepay.core.context import AppContext
from moviepay.services.booking_service import BookingService
from moviepay.services.checkout_service import CheckoutService
from moviepay.services.payment_confirmation import PaymentConfirmationService


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_checkout_service(context: AppContext = Depends(get_context)) -> CheckoutService:
    return CheckoutService(context.gateway, context.settings)


def get_booking_service(context: AppContext = Depends(get_context)) -> BookingService:
    return BookingService(context.store, context.settings)


def get_payment_confirmation_service(
    context: AppContext = Depends(get_context),
    bookings: BookingService = Depends(get_booking_service),
) -> PaymentConfirmationService:
    return PaymentConfirmationService(bookings, context.settings.DEFAULT_MOVIE_TITLE)
