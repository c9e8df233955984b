"""
Booking recorder: validate a purchase and write exactly one booking.

IDEMPOTENCY
===========

Without a checkout session id there is nothing to deduplicate on: two
identical submissions are two bookings. Callers that can should pass the
session id returned by POST /payment (or read from the success redirect).

With a session id:
  1. Look for an existing booking with that key -> return it, no write.
     If it was stored for a different user, title or amount the key has been
     reused, which is a conflict (409) rather than a replay
  2. Insert; the UNIQUE constraint on checkout_session_id is the final guard
  3. If a concurrent request won the insert race, return the winner's row

So a retried request after a lost response is safe, which is not the case
for keyless submissions.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from moviepay.core.config import Settings
from moviepay.core.exceptions import (
    BookingNotFound,
    DuplicateBookingError,
    PersistenceError,
    ValidationError,
)
from moviepay.core.logging import get_logger
from moviepay.core.metrics import record_booking_attempt
from moviepay.models.booking import Booking
from moviepay.repositories.booking_repository import BookingStore
from moviepay.schemas.booking import BookingDraft
from moviepay.services.pricing import fits_amount_column, round_to_minor_units, to_minor_units

logger = get_logger(__name__)

READ_FAILED = "Failed to load bookings"


@dataclass
class BookingResult:
    booking: Booking
    created: bool


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class BookingService:

    def __init__(self, store: BookingStore, settings: Settings):
        self._store = store
        self._settings = settings

    def validate(self, user_id, movie_title, amount) -> None:
        """Raise ValidationError before anything touches the store."""
        # A zero amount counts as missing, like any other falsy field
        if _is_blank(user_id) or _is_blank(movie_title) or _is_blank(amount) or amount == 0:
            record_booking_attempt("invalid")
            logger.warning(
                "booking_rejected",
                reason="missing_fields",
                has_user=not _is_blank(user_id),
                has_title=not _is_blank(movie_title),
                has_amount=not _is_blank(amount),
            )
            raise ValidationError("Missing booking details")

        if not fits_amount_column(amount):
            record_booking_attempt("invalid")
            logger.warning("booking_rejected", reason="invalid_amount", amount=str(amount))
            raise ValidationError("Invalid booking amount")

    async def record_booking(
        self,
        user_id: Optional[str],
        movie_title: Optional[str],
        amount: Optional[float],
        checkout_session_id: Optional[str] = None,
    ) -> BookingResult:
        self.validate(user_id, movie_title, amount)
        checkout_session_id = (checkout_session_id or "").strip() or None

        draft = BookingDraft(
            user_id=str(user_id).strip(),
            movie_title=str(movie_title).strip(),
            amount=round_to_minor_units(amount),
            currency=self._settings.CURRENCY,
            checkout_session_id=checkout_session_id,
        )

        if checkout_session_id:
            existing = await self._with_deadline(
                self._store.get_by_checkout_session(checkout_session_id)
            )
            if existing:
                return self._replayed(existing, draft)

        try:
            booking = await self._with_deadline(self._store.create(draft))
        except DuplicateBookingError:
            existing = await self._with_deadline(
                self._store.get_by_checkout_session(checkout_session_id)
            )
            if existing is None:
                record_booking_attempt("error")
                raise PersistenceError()
            return self._replayed(existing, draft)
        except PersistenceError as e:
            record_booking_attempt("error")
            logger.error(
                "booking_save_failed",
                user_id=draft.user_id,
                movie_title=draft.movie_title,
                error=e.message,
            )
            raise PersistenceError() from e

        record_booking_attempt("created")
        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=booking.user_id,
            movie_title=booking.movie_title,
            amount=booking.amount,
            checkout_session_id=booking.checkout_session_id,
        )
        return BookingResult(booking=booking, created=True)

    async def get_booking(self, booking_id: str) -> Booking:
        booking = await self._with_deadline(self._store.get(booking_id), READ_FAILED)
        if booking is None:
            raise BookingNotFound()
        return booking

    async def list_bookings(self, user_id: str) -> list[Booking]:
        if _is_blank(user_id):
            raise ValidationError("userId is required")
        return await self._with_deadline(self._store.list_for_user(user_id.strip()), READ_FAILED)

    async def _with_deadline(self, awaitable, message: Optional[str] = None):
        try:
            return await asyncio.wait_for(awaitable, timeout=self._settings.STORE_TIMEOUT_SECONDS)
        except asyncio.TimeoutError as e:
            logger.error("booking_store_timeout", timeout_seconds=self._settings.STORE_TIMEOUT_SECONDS)
            raise PersistenceError(message) from e

    def _replayed(self, booking: Booking, draft: BookingDraft) -> BookingResult:
        if (
            booking.user_id != draft.user_id
            or booking.movie_title != draft.movie_title
            or to_minor_units(booking.amount) != to_minor_units(draft.amount)
        ):
            record_booking_attempt("conflict")
            logger.warning(
                "booking_key_reused",
                booking_id=booking.id,
                checkout_session_id=booking.checkout_session_id,
                user_id=draft.user_id,
            )
            raise DuplicateBookingError(
                booking.checkout_session_id,
                "Checkout session already used for a different booking",
            )
        record_booking_attempt("replayed")
        logger.info(
            "booking_replayed",
            booking_id=booking.id,
            checkout_session_id=booking.checkout_session_id,
        )
        return BookingResult(booking=booking, created=False)
