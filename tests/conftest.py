"""Shared fixtures: Stripe adapter, in-memory order store, signed webhook payloads."""

import hashlib
import hmac
import json
import time
from typing import Any, Callable, Optional

import pytest

from checkout_relay.orders.models import Order
from checkout_relay.payments.processor import PaymentProcessor

WEBHOOK_SECRET = "whsec_test_secret"


class FakeOrderStore:
    """Records orders in memory; optionally fails every write."""

    collection = "orders"

    def __init__(self, error: Optional[Exception] = None):
        self.orders: list[Order] = []
        self.error = error

    async def add_order(self, order: Order) -> str:
        if self.error is not None:
            raise self.error
        self.orders.append(order)
        return f"order_{len(self.orders)}"


@pytest.fixture
def processor() -> PaymentProcessor:
    return PaymentProcessor(
        secret_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        success_url="https://shop.example.com/success",
        cancel_url="https://shop.example.com/cancel",
    )


@pytest.fixture
def store() -> FakeOrderStore:
    return FakeOrderStore()


@pytest.fixture
def sign() -> Callable[..., str]:
    """Build a Stripe-Signature header for a payload, as Stripe does."""

    def _sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
        timestamp = int(time.time()) if timestamp is None else timestamp
        signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
        signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={timestamp},v1={signature}"

    return _sign


@pytest.fixture
def make_event() -> Callable[..., bytes]:
    """Serialize a webhook event wrapping a checkout session."""

    def _make(
        event_type: str = "checkout.session.completed",
        amount_total: Optional[int] = 2500,
        metadata: Optional[dict[str, Any]] = None,
    ) -> bytes:
        if metadata is None:
            metadata = {
                "userEmail": "ada@example.com",
                "userName": "Ada Lovelace",
                "productName": "Analytical Engine Manual",
            }
        event = {
            "id": "evt_test_123",
            "object": "event",
            "type": event_type,
            "data": {
                "object": {
                    "id": "cs_test_123",
                    "object": "checkout.session",
                    "amount_total": amount_total,
                    "metadata": metadata,
                }
            },
        }
        return json.dumps(event).encode("utf-8")

    return _make


@pytest.fixture
def failing_store() -> FakeOrderStore:
    return FakeOrderStore(error=RuntimeError("firestore unavailable"))
