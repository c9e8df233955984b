"""
structlog wiring for the payment service.

Every record carries the service name and environment, and Stripe credentials
are masked before rendering: a gateway error message or a logged settings
value may contain a secret key. Production renders one JSON object per line;
other environments use the colored console renderer.
"""

import logging
import re
import sys
from typing import Optional

import structlog

from moviepay.core.config import Settings, get_settings

# sk_live_..., sk_test_..., rk_live_... restricted keys, whsec_... signing secrets
STRIPE_SECRET_PATTERN = re.compile(r"\b(?:sk|rk)_(?:live|test)_\w+|\bwhsec_\w+")
REDACTED = "[redacted]"


def redact_stripe_secrets(logger, method_name, event_dict):
    for key, value in event_dict.items():
        if isinstance(value, str) and STRIPE_SECRET_PATTERN.search(value):
            event_dict[key] = STRIPE_SECRET_PATTERN.sub(REDACTED, value)
    return event_dict


def service_context(settings: Settings):
    """Processor stamping app name and environment on records that lack them."""

    def add_service_context(logger, method_name, event_dict):
        event_dict.setdefault("service", settings.APP_NAME)
        event_dict.setdefault("environment", settings.ENVIRONMENT)
        return event_dict

    return add_service_context


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    production = settings.ENVIRONMENT == "production"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        service_context(settings),
        structlog.processors.StackInfoRenderer(),
    ]
    if production:
        processors.append(structlog.processors.format_exc_info)
    processors.append(redact_stripe_secrets)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if production else structlog.dev.ConsoleRenderer(colors=True)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # uvicorn and SQLAlchemy records come through the stdlib and get the same treatment
            foreign_pre_chain=[structlog.stdlib.add_log_level, service_context(settings), redact_stripe_secrets],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # The request middleware already logs each request; stripe logs full request lines at INFO
    for name in ("uvicorn.access", "sqlalchemy.engine", "stripe"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
