"""
Service error taxonomy.

Every error carries the HTTP status it maps to and the key its message is
reported under, so the exception handlers can build the response body without
knowing which route raised it.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    body_key: str = "message"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {self.body_key: self.message}


class ValidationError(ServiceError):
    """A required booking field is missing or invalid. No side effect occurred."""

    status_code = 400
    default_message = "Missing booking details"


class InvalidCheckoutRequest(ValidationError):
    status_code = 400
    body_key = "error"
    default_message = "Invalid checkout amount"


class GatewayError(ServiceError):
    """The payment provider rejected or failed a session request."""

    status_code = 500
    body_key = "error"
    default_message = "Payment provider error"


class PersistenceError(ServiceError):
    """The booking store failed to durably write or read a record."""

    status_code = 500
    default_message = "Failed to save booking"


class DuplicateBookingError(PersistenceError):
    """A booking already exists for the given checkout session."""

    status_code = 409
    default_message = "Booking already exists for this checkout session"

    def __init__(self, checkout_session_id: str, message: Optional[str] = None):
        self.checkout_session_id = checkout_session_id
        super().__init__(message)


class BookingNotFound(ServiceError):
    status_code = 404
    default_message = "Booking not found"


class WebhookVerificationError(ServiceError):
    status_code = 400
    default_message = "Invalid webhook payload"


class ConfigurationError(ServiceError):
    status_code = 500
    default_message = "Service is not configured"
