"""
Server-side cart repository.

Each user's cart is one JSON document at ``cart:{user_id}`` holding the item
list and a version counter. Every mutation reads the document, applies the
change, and writes it back with compare-and-set, bumping the version. A lost
race is retried; a caller-supplied version that no longer matches is a
conflict.
"""

import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError as SchemaError

from storefront.errors import ConflictError, ValidationError
from storefront.schemas.cart_schema import CartItem, CartItemPatch, CartSnapshot
from storefront.store.kv_store import KVStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 5

# Returns the new item list, or None when nothing should be written.
ItemsMutation = Callable[[list[CartItem]], Optional[list[CartItem]]]


class CartConflictError(ConflictError):
    """The stored cart changed since the caller last read it."""


def cart_key(user_id: str) -> str:
    return f"cart:{user_id}"


def _parse(raw: Optional[str]) -> CartSnapshot:
    if not raw:
        return CartSnapshot()
    data = json.loads(raw)
    if isinstance(data, list):
        # documents written before versioning were a bare item list
        return CartSnapshot(items=[CartItem.model_validate(item) for item in data])
    return CartSnapshot.model_validate(data)


def _dump(snapshot: CartSnapshot) -> str:
    return json.dumps(snapshot.to_wire())


class CartStore:
    """Read-modify-write cart persistence guarded by a version counter."""

    def __init__(self, store: KVStore, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._store = store
        self._max_retries = max_retries

    async def load(self, user_id: str) -> CartSnapshot:
        return _parse(await self._store.get(cart_key(user_id)))

    async def _mutate(
        self,
        user_id: str,
        mutation: ItemsMutation,
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        key = cart_key(user_id)
        for attempt in range(1, self._max_retries + 1):
            raw = await self._store.get(key)
            current = _parse(raw)
            if expected_version is not None and current.version != expected_version:
                raise CartConflictError(
                    f"Cart was modified elsewhere (version {current.version}, "
                    f"expected {expected_version}). Refresh and try again."
                )

            items = mutation([item.model_copy(deep=True) for item in current.items])
            if items is None:
                return current

            updated = CartSnapshot(items=items, version=current.version + 1)
            if await self._store.compare_and_set(key, raw, _dump(updated)):
                return updated
            logger.info("Cart %s write raced (attempt %d/%d)", user_id, attempt, self._max_retries)

        raise CartConflictError("Cart is being modified concurrently. Please try again.")

    async def add_item(
        self, user_id: str, item: CartItem, expected_version: Optional[int] = None
    ) -> CartSnapshot:
        item = item.model_copy(update={"total_price": item.price * item.guests})
        snapshot = await self._mutate(user_id, lambda items: items + [item], expected_version)
        logger.info("Cart %s: added %s (%d items)", user_id, item.id, len(snapshot.items))
        return snapshot

    async def update_item(
        self,
        user_id: str,
        item_id: str,
        patch: CartItemPatch,
        expected_version: Optional[int] = None,
    ) -> CartSnapshot:
        """Merge ``patch`` into the matching item.

        Unknown ids and patches that leave the item as it was write nothing,
        so the version only moves when the cart actually changes.
        """
        changes = patch.model_dump(exclude_unset=True)

        def apply(items: list[CartItem]) -> Optional[list[CartItem]]:
            for index, item in enumerate(items):
                if item.id != item_id:
                    continue
                try:
                    merged = CartItem.model_validate({**item.model_dump(), **changes})
                except SchemaError as exc:
                    field = ".".join(str(part) for part in exc.errors()[0]["loc"])
                    raise ValidationError(f"{field}: {exc.errors()[0]['msg']}") from None
                # the line total is always derived, never taken from the patch
                merged.total_price = merged.price * merged.guests
                if merged == item:
                    return None
                items[index] = merged
                return items
            return None

        return await self._mutate(user_id, apply, expected_version)

    async def remove_item(
        self, user_id: str, item_id: str, expected_version: Optional[int] = None
    ) -> CartSnapshot:
        def apply(items: list[CartItem]) -> Optional[list[CartItem]]:
            remaining = [item for item in items if item.id != item_id]
            return remaining if len(remaining) != len(items) else None

        return await self._mutate(user_id, apply, expected_version)

    async def clear(self, user_id: str, expected_version: Optional[int] = None) -> CartSnapshot:
        """Empty the cart. The document is kept so its version keeps counting up."""
        snapshot = await self._mutate(user_id, lambda items: [] if items else None, expected_version)
        logger.info("Cart %s cleared (version %d)", user_id, snapshot.version)
        return snapshot
