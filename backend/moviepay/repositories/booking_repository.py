"""
Booking store: durable, append-only record of bookings.

Each operation opens its own session, so a create is one atomic
single-row INSERT and no session state is shared between requests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from moviepay.core.exceptions import DuplicateBookingError, PersistenceError
from moviepay.core.logging import get_logger
from moviepay.models.booking import Booking
from moviepay.schemas.booking import BookingDraft

logger = get_logger(__name__)


def _is_checkout_session_conflict(error: IntegrityError) -> bool:
    """Unique-key violation on checkout_session_id, as opposed to a CHECK failure.

    PostgreSQL names the constraint bookings_checkout_session_id_key, SQLite
    reports the column; both messages contain the column name.
    """
    return "checkout_session_id" in str(error.orig)


class BookingStore(ABC):
    """
    Interface the booking service depends on.

    Implementations must raise PersistenceError when storage is unavailable
    and DuplicateBookingError when checkout_session_id is already taken.
    """

    @abstractmethod
    async def create(self, draft: BookingDraft) -> Booking:
        """Persist a new booking, assigning its id and created_at."""

    @abstractmethod
    async def get(self, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_checkout_session(self, checkout_session_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Booking]:
        pass


class SqlAlchemyBookingStore(BookingStore):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, draft: BookingDraft) -> Booking:
        booking = Booking(
            user_id=draft.user_id,
            movie_title=draft.movie_title,
            amount=draft.amount,
            currency=draft.currency,
            checkout_session_id=draft.checkout_session_id,
        )
        try:
            async with self._session_factory() as session:
                session.add(booking)
                await session.commit()
        except IntegrityError as e:
            if draft.checkout_session_id and _is_checkout_session_conflict(e):
                raise DuplicateBookingError(draft.checkout_session_id) from e
            logger.error("booking_insert_rejected", error=str(e.orig))
            raise PersistenceError() from e
        except SQLAlchemyError as e:
            logger.error("booking_insert_failed", error=str(e))
            raise PersistenceError() from e
        return booking

    async def get(self, booking_id: str) -> Optional[Booking]:
        return await self._first(select(Booking).where(Booking.id == booking_id))

    async def get_by_checkout_session(self, checkout_session_id: str) -> Optional[Booking]:
        return await self._first(
            select(Booking).where(Booking.checkout_session_id == checkout_session_id)
        )

    async def list_for_user(self, user_id: str) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("booking_query_failed", error=str(e))
            raise PersistenceError("Failed to load bookings") from e

    async def _first(self, stmt) -> Optional[Booking]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("booking_query_failed", error=str(e))
            raise PersistenceError("Failed to load bookings") from e
