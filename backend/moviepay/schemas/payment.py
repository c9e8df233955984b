"""
Pydantic schemas for checkout and webhook endpoints.
"""

from typing import Optional

from pydantic import Field

from moviepay.schemas.booking import CamelModel


class CheckoutRequest(CamelModel):
    amount: Optional[float] = None
    movie_title: Optional[str] = None
    user_id: Optional[str] = None


class CheckoutResponse(CamelModel):
    url: str
    session_id: str


class WebhookAck(CamelModel):
    received: bool = True
    action: str
    booking_id: Optional[str] = Field(default=None)
