"""
Server-side booking repository.

Bookings live at ``booking:{id}``; each user's booking ids are kept in a
hand-maintained index list at ``user_bookings:{user_id}``.
"""

import json
import logging
import random
import string
import time
from typing import Optional

from storefront.booking.lifecycle import BookingLifecycle
from storefront.errors import ConflictError, NotFoundError
from storefront.schemas.booking_schema import Booking, BookingCreateRequest, BookingPatch
from storefront.store.kv_store import KVStore
from storefront.utils import utc_now_iso

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
INDEX_MAX_RETRIES = 10


def booking_key(booking_id: str) -> str:
    return f"booking:{booking_id}"


def user_bookings_key(user_id: str) -> str:
    return f"user_bookings:{user_id}"


def new_booking_id() -> str:
    """``booking_<epoch millis>_<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"booking_{int(time.time() * 1000)}_{suffix}"


class BookingStore:
    """Persists bookings and the per-user booking index."""

    def __init__(self, store: KVStore, lifecycle: Optional[BookingLifecycle] = None) -> None:
        self._store = store
        self._lifecycle = lifecycle or BookingLifecycle()

    async def create(self, request: BookingCreateRequest) -> Booking:
        """Persist a new booking. Whatever status the request carries, it starts pending."""
        now = utc_now_iso()
        booking = Booking(
            id=new_booking_id(),
            user_id=request.user_id,
            items=[line.model_copy(deep=True) for line in request.items],
            total_amount=request.total_amount,
            payment_method=request.payment_method,
            customer_info=request.customer_info.model_copy(deep=True),
            status=self._lifecycle.INITIAL_STATUS,
            payment_reference=request.payment_reference,
            created_at=now,
            updated_at=now,
        )
        await self._store.set(booking_key(booking.id), json.dumps(booking.to_wire()))
        await self._append_to_index(booking.user_id, booking.id)
        logger.info(
            "Booking created: %s for user %s (%d items, total %.2f)",
            booking.id, booking.user_id, len(booking.items), booking.total_amount,
        )
        return booking

    async def _append_to_index(self, user_id: str, booking_id: str) -> None:
        key = user_bookings_key(user_id)
        for _ in range(INDEX_MAX_RETRIES):
            raw = await self._store.get(key)
            ids = json.loads(raw) if raw else []
            ids.append(booking_id)
            if await self._store.compare_and_set(key, raw, json.dumps(ids)):
                return
        raise ConflictError(f"Could not index booking {booking_id}; please retry.")

    async def booking_ids(self, user_id: str) -> list[str]:
        raw = await self._store.get(user_bookings_key(user_id))
        return json.loads(raw) if raw else []

    async def list_for_user(self, user_id: str) -> list[Booking]:
        """Resolve the user's index into records, skipping ids with no record."""
        bookings = []
        for booking_id in await self.booking_ids(user_id):
            raw = await self._store.get(booking_key(booking_id))
            if raw:
                bookings.append(Booking.model_validate_json(raw))
            else:
                logger.warning("Booking index for %s points at missing %s", user_id, booking_id)
        return bookings

    async def get(self, booking_id: str) -> Booking:
        raw = await self._store.get(booking_key(booking_id))
        if not raw:
            raise NotFoundError("Booking not found")
        return Booking.model_validate_json(raw)

    async def update(self, booking_id: str, patch: BookingPatch) -> Booking:
        """Merge ``patch`` into the stored booking and stamp ``updatedAt``.

        Raises:
            NotFoundError: If the booking does not exist.
            InvalidTransitionError: If the patch asks for an illegal status change.
        """
        booking = await self.get(booking_id)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        if patch.status is not None:
            self._lifecycle.validate(booking.status, patch.status)

        updated = Booking.model_validate({**booking.model_dump(), **changes, "updated_at": utc_now_iso()})
        await self._store.set(booking_key(booking_id), json.dumps(updated.to_wire()))
        logger.info("Booking %s updated: %s", booking_id, sorted(changes))
        return updated
