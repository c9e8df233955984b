"""
Pytest fixtures for the booking store, payment gateway, and HTTP client.

Store-backed tests run against a throwaway SQLite file per test. Failure
scenarios use the in-memory fakes below so write counts can be asserted.
"""

import asyncio
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine

from moviepay.main import app
from moviepay.core.config import Settings
from moviepay.core.context import AppContext
from moviepay.core.exceptions import DuplicateBookingError, PersistenceError
from moviepay.db.base import Base, utcnow
from moviepay.db.session import create_engine_from_settings, create_session_factory
from moviepay.infrastructure.payment_gateway import CheckoutSession, PaymentGateway, StubGateway
from moviepay.models.booking import Booking, new_booking_id
from moviepay.repositories.booking_repository import BookingStore, SqlAlchemyBookingStore

WEBHOOK_SECRET = "whsec_test_secret"
CHECKOUT_HOST = "checkout.stripe.com"


class FakeGateway(PaymentGateway):
    """Gateway double that records calls and can fail or stall on demand."""

    def __init__(self, error: Optional[Exception] = None, delay: float = 0):
        super().__init__(WEBHOOK_SECRET)
        self.error = error
        self.delay = delay
        self.calls = []

    async def create_session(self, line_items, success_url, cancel_url, metadata=None):
        self.calls.append(
            {
                "line_items": line_items,
                "success_url": success_url,
                "cancel_url": cancel_url,
                "metadata": metadata,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        session_id = f"cs_test_fake_{len(self.calls)}"
        return CheckoutSession(id=session_id, url=f"https://{CHECKOUT_HOST}/c/pay/{session_id}")


class RecordingStore(BookingStore):
    """In-memory store that counts writes."""

    def __init__(self, fail: bool = False, delay: float = 0):
        self.fail = fail
        self.delay = delay
        self.create_calls = 0
        self.bookings: dict[str, Booking] = {}

    async def create(self, draft):
        self.create_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise PersistenceError("connection refused")
        if draft.checkout_session_id and await self.get_by_checkout_session(draft.checkout_session_id):
            raise DuplicateBookingError(draft.checkout_session_id)
        booking = Booking(id=new_booking_id(), created_at=utcnow(), **draft.model_dump())
        self.bookings[booking.id] = booking
        return booking

    async def get(self, booking_id):
        return self.bookings.get(booking_id)

    async def get_by_checkout_session(self, checkout_session_id):
        for booking in self.bookings.values():
            if booking.checkout_session_id == checkout_session_id:
                return booking
        return None

    async def list_for_user(self, user_id):
        return [b for b in self.bookings.values() if b.user_id == user_id]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'bookings.db'}",
        FRONTEND_URL="https://movies.test/",
        STRIPE_USE_STUB=True,
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        STRIPE_STUB_CHECKOUT_URL=f"https://{CHECKOUT_HOST}/c/pay",
        GATEWAY_TIMEOUT_SECONDS=1.0,
        STORE_TIMEOUT_SECONDS=1.0,
    )


@pytest_asyncio.fixture(scope="function")
async def engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create tables, yield engine, then dispose."""
    engine = create_engine_from_settings(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def store(engine: AsyncEngine) -> SqlAlchemyBookingStore:
    return SqlAlchemyBookingStore(create_session_factory(engine))


@pytest.fixture
def gateway(settings: Settings) -> StubGateway:
    return StubGateway(settings.STRIPE_STUB_CHECKOUT_URL, settings.STRIPE_WEBHOOK_SECRET)


@pytest.fixture
def context(settings, gateway, store, engine) -> AppContext:
    return AppContext(settings=settings, gateway=gateway, store=store, engine=engine)


@pytest_asyncio.fixture(scope="function")
async def client(context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the test context installed.

    Tests may replace app.state.context to swap in failing collaborators.
    """
    app.state.context = context

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.context
