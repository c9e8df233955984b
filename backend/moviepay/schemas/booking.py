"""
Pydantic schemas for booking-related request/response validation.

Required-field checks live in the booking service rather than here, so a
missing field is reported as "Missing booking details" and never reaches
the store.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCreate(CamelModel):
    user_id: Optional[str] = None
    movie_title: Optional[str] = None
    amount: Optional[float] = None
    checkout_session_id: Optional[str] = None


class BookingDraft(CamelModel):
    """A validated booking that has not been written yet."""

    user_id: str
    movie_title: str
    amount: float
    currency: str
    checkout_session_id: Optional[str] = None


class BookingResponse(CamelModel):
    id: str
    user_id: str
    movie_title: str
    amount: float
    currency: str
    checkout_session_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class BookingStoredResponse(BaseModel):
    message: str
    booking: BookingResponse
