"""
Movie Ticket Checkout API - Main Application Entry Point

- Hosted Stripe Checkout sessions for ticket purchases
- Booking records keyed by checkout session for idempotent replays
- Signed webhook confirmation of completed payments
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from moviepay.api.exception_handlers import register_exception_handlers
from moviepay.api.middleware import RequestLoggingMiddleware
from moviepay.api.router import api_router
from moviepay.core.config import get_settings
from moviepay.core.context import build_context
from moviepay.core.logging import get_logger, setup_logging
from moviepay.core.metrics import metrics_endpoint
from moviepay.db.session import wait_for_database

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        frontend_url=settings.frontend_origin,
    )

    # Raises ConfigurationError before any traffic is accepted
    context = build_context(settings)
    await wait_for_database(
        context.engine,
        settings.DB_CONNECT_MAX_RETRIES,
        settings.DB_CONNECT_RETRY_DELAY,
    )
    app.state.context = context
    logger.info("application_ready", gateway=context.gateway.provider)

    yield

    await context.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hosted checkout and booking records for movie tickets",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/", tags=["Root"], response_class=PlainTextResponse)
async def root():
    return "Backend is running successfully!"


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


def run() -> None:
    uvicorn.run("moviepay.main:app", host=settings.HOST, port=settings.PORT)
