"""
Tests for the structlog processors added by the service.
"""

import pytest

from moviepay.core.logging import REDACTED, redact_stripe_secrets, service_context


@pytest.mark.parametrize(
    "value",
    [
        "Invalid API Key provided: sk_test_51Habc123XYZ",
        "key=sk_live_abcDEF987",
        "rk_live_restricted42 was rejected",
        "whsec_test_secret",
    ],
)
def test_stripe_secrets_are_masked(value):
    event = redact_stripe_secrets(None, "error", {"event": "gateway_failed", "error": value})

    assert "sk_" not in event["error"].replace(REDACTED, "")
    assert "whsec_" not in event["error"]
    assert REDACTED in event["error"]
    assert "secret" not in event["error"]


def test_non_secret_values_untouched():
    event = {"event": "booking_created", "checkout_session_id": "cs_test_1", "amount": 250.0}
    assert redact_stripe_secrets(None, "info", dict(event)) == event


def test_service_context_added_without_overriding(settings):
    add_service_context = service_context(settings)

    event = add_service_context(None, "info", {"event": "request_completed"})
    assert event["service"] == settings.APP_NAME
    assert event["environment"] == settings.ENVIRONMENT

    event = add_service_context(None, "info", {"event": "x", "environment": "load-test"})
    assert event["environment"] == "load-test"
