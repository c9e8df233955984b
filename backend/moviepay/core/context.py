"""
Process-wide handles created once at startup.

The lifespan hook builds an AppContext and stores it on app.state; request
dependencies read it from there. Components receive what they need at
construction time instead of reaching for module globals.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from moviepay.core.config import Settings
from moviepay.core.logging import get_logger
from moviepay.db.session import create_engine_from_settings, create_session_factory
from moviepay.infrastructure.payment_gateway import PaymentGateway, StripeGateway, StubGateway
from moviepay.repositories.booking_repository import BookingStore, SqlAlchemyBookingStore

logger = get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    gateway: PaymentGateway
    store: BookingStore
    engine: Optional[AsyncEngine] = None

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def build_gateway(settings: Settings) -> PaymentGateway:
    """Stub when explicitly requested, Stripe otherwise."""
    if settings.STRIPE_USE_STUB:
        logger.warning("payment_gateway_stubbed", checkout_url=settings.STRIPE_STUB_CHECKOUT_URL)
        return StubGateway(settings.STRIPE_STUB_CHECKOUT_URL, settings.STRIPE_WEBHOOK_SECRET)
    return StripeGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)


def build_context(settings: Settings) -> AppContext:
    settings.ensure_configured()
    engine = create_engine_from_settings(settings)
    store = SqlAlchemyBookingStore(create_session_factory(engine))
    return AppContext(
        settings=settings,
        gateway=build_gateway(settings),
        store=store,
        engine=engine,
    )
