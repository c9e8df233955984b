"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Checkout metrics
checkout_sessions = Counter(
    'checkout_sessions_total',
    'Checkout session requests',
    ['status']  # created, invalid, gateway_error
)

gateway_latency = Histogram(
    'payment_gateway_latency_seconds',
    'Payment gateway session creation latency',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # created, replayed, conflict, invalid, error
)

# Webhook metrics
webhook_events = Counter(
    'payment_webhook_events_total',
    'Payment provider webhook events received',
    ['event_type', 'action']
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_checkout_session(status: str):
    """Status: created, invalid, gateway_error"""
    checkout_sessions.labels(status=status).inc()


def record_booking_attempt(status: str):
    """Status: created, replayed, conflict, invalid, error"""
    booking_attempts.labels(status=status).inc()


def record_webhook_event(event_type: str, action: str):
    webhook_events.labels(event_type=event_type, action=action).inc()
