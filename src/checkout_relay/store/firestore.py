"""Cloud Firestore persistence for paid orders (Firebase Admin SDK)."""

import asyncio
import logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from checkout_relay.config.settings import AppConfig
from checkout_relay.orders.models import Order

logger = logging.getLogger(__name__)

APP_NAME = "checkout-relay"


class OrderStoreError(Exception):
    pass


class OrderStore:
    """Writes Order documents to a Firestore collection.

    Construct with an existing ``google.cloud.firestore.Client`` (tests pass a
    mock) or use ``from_config`` to initialize the Firebase Admin app from the
    service account fields in the environment.
    """

    def __init__(self, client: Any, collection: str = "orders"):
        self._client = client
        self._collection = collection

    @classmethod
    def from_config(cls, config: AppConfig) -> "OrderStore":
        """Initialize (or reuse) the named Firebase app and its Firestore client.

        Raises:
            OrderStoreError: If credentials are incomplete or rejected by the SDK
        """
        info = config.firebase_service_account()
        missing = [
            key for key in ("project_id", "private_key", "client_email") if not info[key]
        ]
        if missing:
            raise OrderStoreError(
                f"Firebase service account incomplete, missing: {', '.join(missing)}"
            )

        try:
            app = firebase_admin.get_app(APP_NAME)
            logger.debug("Firebase app already initialized.")
        except ValueError:
            try:
                app = firebase_admin.initialize_app(
                    credentials.Certificate(info), name=APP_NAME
                )
            except ValueError as e:
                raise OrderStoreError(f"Invalid Firebase credentials: {e}") from e
            logger.info(f"Firebase Admin SDK initialized for project {info['project_id']}.")

        return cls(firestore.client(app=app), config.orders_collection)

    @property
    def collection(self) -> str:
        return self._collection

    async def add_order(self, order: Order) -> str:
        """Add the order under an auto-generated ID and return that ID.

        No retry; SDK errors propagate to the caller.
        """
        document = order.to_document()

        def _add():
            _, ref = self._client.collection(self._collection).add(document)
            return ref.id

        loop = asyncio.get_running_loop()
        doc_id = await loop.run_in_executor(None, _add)
        logger.debug(f"Added order to {self._collection} -> id={doc_id}")
        return doc_id
