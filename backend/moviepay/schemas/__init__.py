from moviepay.schemas.booking import BookingCreate, BookingResponse, BookingStoredResponse, BookingDraft
from moviepay.schemas.payment import CheckoutRequest, CheckoutResponse, WebhookAck

__all__ = [
    "BookingCreate", "BookingResponse", "BookingStoredResponse", "BookingDraft",
    "CheckoutRequest", "CheckoutResponse", "WebhookAck",
]
