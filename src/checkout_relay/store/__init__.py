"""Document store for paid orders."""

from checkout_relay.store.firestore import OrderStore, OrderStoreError

__all__ = ["OrderStore", "OrderStoreError"]
