"""
Tests for startup configuration checks.
"""

import pytest

from moviepay.core.config import Settings
from moviepay.core.context import build_context, build_gateway
from moviepay.core.exceptions import ConfigurationError
from moviepay.infrastructure.payment_gateway import StripeGateway, StubGateway


def test_missing_database_and_stripe_key_fail_fast():
    settings = Settings(DATABASE_URL="", STRIPE_SECRET_KEY="", STRIPE_USE_STUB=False)

    with pytest.raises(ConfigurationError) as exc_info:
        build_context(settings)
    assert "DATABASE_URL" in exc_info.value.message
    assert "STRIPE_SECRET_KEY" in exc_info.value.message


def test_stub_mode_does_not_need_stripe_key():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite:///x.db", STRIPE_SECRET_KEY="", STRIPE_USE_STUB=True)
    assert settings.missing_required() == []
    assert isinstance(build_gateway(settings), StubGateway)


def test_stripe_gateway_selected_with_key():
    settings = Settings(DATABASE_URL="postgresql+asyncpg://db/x", STRIPE_SECRET_KEY="sk_test_1")
    assert isinstance(build_gateway(settings), StripeGateway)


def test_frontend_origin_and_sync_url():
    settings = Settings(
        FRONTEND_URL="https://movies.test/",
        DATABASE_URL="postgresql+asyncpg://u:p@db:5432/movies",
    )
    assert settings.frontend_origin == "https://movies.test"
    assert settings.allowed_origins[0] == "https://movies.test"
    assert settings.sync_database_url == "postgresql://u:p@db:5432/movies"
