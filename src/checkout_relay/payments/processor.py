"""Thin adapter over the Stripe SDK for checkout sessions and webhook verification."""

import asyncio
import json
import logging
from typing import Any, Optional

import stripe

from checkout_relay.config.settings import AppConfig
from checkout_relay.orders.models import CheckoutRequest

logger = logging.getLogger(__name__)


class PaymentProcessor:
    """Creates hosted Stripe Checkout sessions and verifies webhook events.

    The API key is passed per request instead of being set on the global
    ``stripe`` module, so several processors can coexist in one process.
    """

    def __init__(
        self,
        secret_key: str,
        webhook_secret: str,
        success_url: str,
        cancel_url: str,
        currency: str = "usd",
        tolerance: Optional[int] = None,
    ):
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        self._success_url = success_url
        self._cancel_url = cancel_url
        self._currency = currency
        self._tolerance = stripe.Webhook.DEFAULT_TOLERANCE if tolerance is None else tolerance

    @classmethod
    def from_config(cls, config: AppConfig) -> "PaymentProcessor":
        return cls(
            secret_key=config.stripe_secret_key.get_secret_value(),
            webhook_secret=config.stripe_webhook_secret.get_secret_value(),
            success_url=config.success_url,
            cancel_url=config.cancel_url,
            currency=config.currency,
        )

    def session_params(self, request: CheckoutRequest) -> dict[str, Any]:
        """Keyword arguments for stripe.checkout.Session.create."""
        return {
            "payment_method_types": ["card"],
            "mode": "payment",
            "customer_email": request.user_email,
            "line_items": [
                {
                    "price_data": {
                        "currency": self._currency,
                        "product_data": {"name": request.product_name},
                        "unit_amount": request.amount,
                    },
                    "quantity": 1,
                }
            ],
            "success_url": self._success_url,
            "cancel_url": self._cancel_url,
            "metadata": request.metadata(),
        }

    async def create_checkout_session(self, request: CheckoutRequest) -> str:
        """Create a hosted Checkout Session and return its ID.

        Raises:
            stripe.StripeError: On Stripe API errors
        """
        params = self.session_params(request)

        # Stripe SDK is blocking; keep the event loop free
        loop = asyncio.get_running_loop()
        session = await loop.run_in_executor(
            None,
            lambda: stripe.checkout.Session.create(api_key=self._secret_key, **params),
        )

        logger.info(f"Created checkout session {session.id} for {request.user_email}")
        return session.id

    def verify_event(self, payload: bytes, sig_header: Optional[str]) -> dict[str, Any]:
        """Verify the Stripe-Signature header, then decode the event.

        The signature covers the exact request bytes, so the payload is only
        parsed after the check passes.

        Args:
            payload: Raw request body, unmodified
            sig_header: Value of the Stripe-Signature header

        Returns:
            Decoded event as a plain dict

        Raises:
            stripe.SignatureVerificationError: Missing, malformed or mismatched signature
            ValueError: Payload is not UTF-8 JSON
        """
        if not sig_header:
            raise stripe.SignatureVerificationError(
                "Missing stripe-signature header", sig_header, payload
            )

        text = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(
            text, sig_header, self._webhook_secret, self._tolerance
        )
        event = json.loads(text)
        if not isinstance(event, dict):
            raise ValueError("Webhook payload is not a JSON object")
        return event
