"""Stripe webhook handler and event processing."""

import logging
from typing import Optional

import stripe
from aiohttp import web

from checkout_relay.orders.models import IncompleteSessionError, Order
from checkout_relay.payments.processor import PaymentProcessor
from checkout_relay.store.firestore import OrderStore

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


async def handle_webhook(
    payload: bytes,
    sig_header: Optional[str],
    processor: PaymentProcessor,
    store: OrderStore,
) -> web.Response:
    """Verify a Stripe webhook and persist an order for completed checkouts.

    Once the signature checks out the event is always acknowledged with 200,
    even if the order write fails, so Stripe does not keep redelivering it
    during a store outage.

    Args:
        payload: Raw webhook payload bytes
        sig_header: Stripe-Signature header value
        processor: Stripe adapter holding the webhook signing secret
        store: Order store

    Returns:
        aiohttp.web.Response (200 for accepted events, 400 on verification failure)
    """
    try:
        event = processor.verify_event(payload, sig_header)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error(f"Webhook Error: {e}")
        return web.Response(status=400, text=f"Webhook Error: {e}")

    event_type = event.get("type")
    logger.info(f"Received webhook: {event_type} ({event.get('id')})")

    if event_type == CHECKOUT_COMPLETED:
        await _handle_checkout_completed((event.get("data") or {}).get("object"), store)
    else:
        logger.info(f"Unhandled event type: {event_type}")

    return web.json_response({"received": True})


async def _handle_checkout_completed(session: Optional[dict], store: OrderStore) -> None:
    """Write one Paid order for a completed session; failures are only logged."""
    try:
        order = Order.from_session(session)
    except IncompleteSessionError as e:
        logger.warning(f"{CHECKOUT_COMPLETED}: {e} - skipping")
        return

    try:
        doc_id = await store.add_order(order)
    except Exception as e:
        logger.exception(f"Error saving order for session {session.get('id')}: {e}")
        return

    logger.info(
        f"Order {doc_id} saved: {order.product_name} "
        f"{order.amount_paid} paid by {order.customer_email}"
    )
