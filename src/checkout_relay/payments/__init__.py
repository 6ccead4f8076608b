"""Stripe checkout and webhook processing.

Handles checkout session creation and verification of webhook events that
confirm payment.
"""

from checkout_relay.payments.checkout import handle_checkout
from checkout_relay.payments.processor import PaymentProcessor
from checkout_relay.payments.webhooks import handle_webhook

__all__ = [
    "PaymentProcessor",
    "handle_checkout",
    "handle_webhook",
]
