"""Order records and checkout request validation."""

from checkout_relay.orders.models import (
    CheckoutRequest,
    IncompleteSessionError,
    InvalidCheckoutRequest,
    Order,
    parse_checkout_request,
)

__all__ = [
    "CheckoutRequest",
    "IncompleteSessionError",
    "InvalidCheckoutRequest",
    "Order",
    "parse_checkout_request",
]
