"""Application entry point."""

import asyncio
import logging
import signal
import sys

from checkout_relay.config import get_config
from checkout_relay.payments.processor import PaymentProcessor
from checkout_relay.server import create_app, run_server
from checkout_relay.store.firestore import OrderStore

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def boot(shutdown_event: asyncio.Event) -> None:
    """
    Boot sequence: load config → build Stripe and Firestore clients → serve.

    Raises:
        SystemExit: On configuration or credential errors
    """
    logger = logging.getLogger(__name__)

    try:
        config = get_config()
        logger.info(f"Configuration loaded: env={config.env}")

        processor = PaymentProcessor.from_config(config)
        store = OrderStore.from_config(config)
        logger.info(f"Order store ready: collection={store.collection}")
    except Exception as e:
        logger.error(f"Boot sequence failed: {e}")
        raise SystemExit(1) from e

    app = create_app(processor, store, config)
    await run_server(app, shutdown_event=shutdown_event, config=config)


def main() -> None:
    """Run the relay as a standalone process.

    Blocks until SIGTERM/SIGINT received.
    """
    try:
        config = get_config()
    except Exception as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logging.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    shutdown_event = asyncio.Event()

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}")
        loop.call_soon_threadsafe(shutdown_event.set)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        loop.run_until_complete(boot(shutdown_event))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        loop.close()
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
