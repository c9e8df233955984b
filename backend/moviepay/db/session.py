"""
Async engine and session factory construction.

The engine is created once in the application lifespan and handed to the
booking store through the application context; nothing here is global.
"""

import asyncio

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from moviepay.core.config import Settings
from moviepay.core.logging import get_logger

logger = get_logger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not settings.DATABASE_URL.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return create_async_engine(settings.DATABASE_URL, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def wait_for_database(engine: AsyncEngine, max_retries: int, retry_delay_seconds: float) -> None:
    """Block startup until the database answers, or raise after max_retries."""
    for attempt in range(1, max_retries + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("database_ready")
            return
        except (OperationalError, OSError):
            if attempt == max_retries:
                logger.error("database_unreachable", attempts=max_retries)
                raise
            logger.warning(
                "database_not_ready",
                attempt=attempt,
                max_retries=max_retries,
                retry_in_seconds=retry_delay_seconds,
            )
            await asyncio.sleep(retry_delay_seconds)
