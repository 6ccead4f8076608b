"""Stripe Checkout session creation for one-off product payments."""

import logging
from typing import Any

from aiohttp import web

from checkout_relay.orders.models import InvalidCheckoutRequest, parse_checkout_request
from checkout_relay.payments.processor import PaymentProcessor

logger = logging.getLogger(__name__)


async def handle_checkout(body: Any, processor: PaymentProcessor) -> web.Response:
    """Validate a checkout request and create a hosted Checkout Session.

    The customer's email, name and product name travel as session metadata
    so the webhook can rebuild the order after payment.

    Args:
        body: Decoded JSON request body
        processor: Stripe adapter used to create the session

    Returns:
        aiohttp.web.Response (200 {sessionId}, 400 or 500 {error})
    """
    try:
        request = parse_checkout_request(body)
    except InvalidCheckoutRequest as e:
        logger.warning(f"Rejected checkout request: {e}")
        return web.json_response({"error": str(e)}, status=400)

    try:
        session_id = await processor.create_checkout_session(request)
    except Exception as e:
        logger.exception(f"Failed to create checkout session for {request.user_email}: {e}")
        return web.json_response({"error": "Internal Server Error"}, status=500)

    return web.json_response({"sessionId": session_id})
