"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from moviepay.api.routes import payments, bookings, webhooks

api_router = APIRouter()
api_router.include_router(payments.router)
api_router.include_router(bookings.router)
api_router.include_router(webhooks.router)
