"""
Backend composition root.

Everything the HTTP handlers need is built here once and handed to the app,
so tests can swap the key-value store (or any repository) for their own.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from storefront.booking.lifecycle import BookingLifecycle
from storefront.config import AppConfig, settings
from storefront.store.booking_store import BookingStore
from storefront.store.cart_store import CartStore
from storefront.store.kv_store import KVStore, create_store
from storefront.store.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """Wired backend services sharing one key-value store."""
    config: AppConfig
    store: KVStore
    carts: CartStore
    bookings: BookingStore
    users: UserStore
    lifecycle: BookingLifecycle = field(default_factory=BookingLifecycle)

    async def close(self) -> None:
        await self.store.close()


def build_backend(config: Optional[AppConfig] = None, store: Optional[KVStore] = None) -> Backend:
    config = config or settings
    store = store or create_store(config.store)
    lifecycle = BookingLifecycle()
    backend = Backend(
        config=config,
        store=store,
        carts=CartStore(store, max_retries=config.store.cas_max_retries),
        bookings=BookingStore(store, lifecycle),
        users=UserStore(store),
        lifecycle=lifecycle,
    )
    logger.debug("Backend built with %s", type(store).__name__)
    return backend
