"""
Infrastructure layer - external system integrations.
Keeps business logic clean from provider details.
"""

from .payment_gateway import CheckoutSession, PaymentGateway, StripeGateway, StubGateway

__all__ = ['CheckoutSession', 'PaymentGateway', 'StripeGateway', 'StubGateway']
