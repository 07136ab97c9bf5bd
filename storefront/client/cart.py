"""
Client-side cart state.

The cart mirrors the server copy: every mutation is sent to the API and is
followed by a full re-fetch, so ``items`` is always what the server last
returned. The cart version from the last fetch rides along on each mutation;
a 409 means another tab or device changed the cart first.
"""

import logging
from typing import Any, Optional

from storefront.client.api_client import ApiClient, ApiResponse
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession
from storefront.schemas.cart_schema import CartItem, CartItemPatch, CartSnapshot
from storefront.schemas.user_schema import User

logger = logging.getLogger(__name__)

MIN_GUESTS = 1
SIGN_IN_TO_ADD = "Please sign in to add items to cart"


class CartService:
    def __init__(self, api: ApiClient, session: AuthSession, notifier: Notifier) -> None:
        self._api = api
        self._session = session
        self._notifier = notifier
        self.items: list[CartItem] = []
        self.version = 0
        self.loading = False
        session.subscribe(self._on_user_changed)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_amount(self) -> float:
        return sum(item.total_price for item in self.items)

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)

    async def _on_user_changed(self, user: Optional[User]) -> None:
        await self.refresh()

    def _reset(self) -> None:
        self.items = []
        self.version = 0

    async def refresh(self) -> None:
        """Replace local state with the server's cart. Signed out means empty."""
        user = self._session.user
        if user is None:
            self._reset()
            return

        self.loading = True
        try:
            response = await self._api.get_cart(user.id)
            if response.success:
                snapshot = CartSnapshot.model_validate(response.data)
                self.items = snapshot.items
                self.version = snapshot.version
            else:
                logger.error("Error loading cart: %s", response.error)
        finally:
            self.loading = False

    async def _after_mutation(self, response: ApiResponse, failure: str) -> bool:
        if response.status_code == 409:
            self._notifier.error(response.error or "Cart changed elsewhere")
            await self.refresh()
            return False
        if not response.success:
            self._notifier.error(failure)
            return False
        await self.refresh()
        return True

    async def add_to_cart(self, item: CartItem) -> bool:
        user = self._session.user
        if user is None:
            self._notifier.auth_required(SIGN_IN_TO_ADD)
            return False

        response = await self._api.add_to_cart(user.id, item.to_wire(), self.version)
        added = await self._after_mutation(response, "Failed to add item to cart")
        if added:
            self._notifier.success(f"{item.title} added to cart")
        return added

    async def update_cart_item(self, item_id: str, patch: dict[str, Any]) -> bool:
        """Apply a partial update. Unknown items are ignored without a request.

        A guest count is clamped to at least one and the line total is
        recomputed from the stored unit price before sending.
        """
        user = self._session.user
        current = self.get_item(item_id)
        if user is None or current is None:
            return False

        changes = dict(patch)
        if "guests" in changes:
            guests = max(MIN_GUESTS, int(changes["guests"]))
            changes["guests"] = guests
            price = changes.get("price", current.price)
            changes["total_price"] = price * guests
            changes.pop("totalPrice", None)
        body = CartItemPatch.model_validate(changes).to_wire(exclude_unset=True)

        response = await self._api.update_cart_item(user.id, item_id, body, self.version)
        return await self._after_mutation(response, "Failed to update cart item")

    async def change_guests(self, item_id: str, delta: int) -> bool:
        item = self.get_item(item_id)
        if item is None:
            return False
        return await self.update_cart_item(item_id, {"guests": item.guests + delta})

    async def remove_from_cart(self, item_id: str) -> bool:
        user = self._session.user
        if user is None:
            return False
        response = await self._api.remove_from_cart(user.id, item_id, self.version)
        removed = await self._after_mutation(response, "Failed to remove item from cart")
        if removed:
            self._notifier.success("Item removed from cart")
        return removed

    async def clear_cart(self) -> bool:
        """Empty the cart. Clearing an already empty cart succeeds.

        The server keeps counting versions across a clear, so the returned
        version is adopted rather than starting over from zero.
        """
        user = self._session.user
        if user is None:
            self._reset()
            return True
        response = await self._api.clear_cart(user.id, self.version)
        if not response.success:
            return await self._after_mutation(response, "Failed to clear cart")
        self.items = []
        self.version = response.data["version"]
        return True
