"""aiohttp server exposing the checkout and Stripe webhook endpoints."""

import asyncio
import json
import logging
from typing import Awaitable, Callable, Optional

from aiohttp import web

from checkout_relay.config.settings import AppConfig, get_config
from checkout_relay.payments.checkout import handle_checkout
from checkout_relay.payments.processor import PaymentProcessor
from checkout_relay.payments.webhooks import handle_webhook
from checkout_relay.store.firestore import OrderStore

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

ACCESS_LOG_FORMAT = '%a "%r" %s %b %Tfs'


def cors_middleware(allow_origin: str = "*"):
    """Build a middleware that answers preflights and tags every response."""
    headers = {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
    }

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if request.method == "OPTIONS":
            return web.Response(status=200, headers=headers)

        try:
            response = await handler(request)
        except web.HTTPException as e:
            e.headers.update(headers)
            raise
        response.headers.update(headers)
        return response

    return middleware


async def checkout_endpoint(request: web.Request) -> web.Response:
    """Handle POST /create-checkout-session.

    Only this route decodes its body as JSON; the webhook route needs the
    untouched bytes.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return web.json_response({"error": "Invalid JSON body"}, status=400)

    return await handle_checkout(body, request.app["processor"])


async def webhook_endpoint(request: web.Request) -> web.Response:
    """Handle POST /webhook.

    The raw payload must reach signature verification byte-for-byte, so it
    is read before anything else touches the body.
    """
    payload = await request.read()
    sig_header = request.headers.get("Stripe-Signature")

    return await handle_webhook(
        payload, sig_header, request.app["processor"], request.app["store"]
    )


def create_app(
    processor: PaymentProcessor,
    store: OrderStore,
    config: Optional[AppConfig] = None,
) -> web.Application:
    """Create aiohttp application with checkout and webhook routes.

    Args:
        processor: Stripe adapter
        store: Order store
        config: Optional config; only the CORS origin is read from it

    Returns:
        Configured aiohttp Application
    """
    allow_origin = config.cors_allow_origin if config else "*"

    app = web.Application(middlewares=[cors_middleware(allow_origin)])
    app.router.add_post("/create-checkout-session", checkout_endpoint)
    app.router.add_post("/webhook", webhook_endpoint)

    app["processor"] = processor
    app["store"] = store

    return app


async def run_server(
    app: web.Application,
    shutdown_event: Optional[asyncio.Event] = None,
    config: Optional[AppConfig] = None,
) -> None:
    """Run the HTTP server until shutdown signal.

    Args:
        app: Application from create_app
        shutdown_event: Optional event to signal shutdown
        config: Optional config; defaults to get_config()
    """
    config = config or get_config()

    runner = web.AppRunner(app, access_log_format=ACCESS_LOG_FORMAT)
    await runner.setup()

    site = web.TCPSite(runner, config.host, config.port)
    await site.start()

    logger.info(f"Server running on port {config.port}")

    # Wait for shutdown signal
    if shutdown_event:
        await shutdown_event.wait()
    else:
        # Run forever if no shutdown event provided
        await asyncio.Event().wait()

    logger.info("Shutting down server...")
    await runner.cleanup()
