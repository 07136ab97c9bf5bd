"""Booking history for the account dashboard: load, filter, search, sort, cancel."""

import logging
from enum import Enum
from typing import Optional

from storefront.client.api_client import ApiClient
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession
from storefront.schemas.booking_schema import Booking, BookingStatus

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


class SortKey(str, Enum):
    DATE = "date"
    PRICE = "price"
    STATUS = "status"


class BookingHistory:
    def __init__(self, api: ApiClient, session: AuthSession, notifier: Notifier) -> None:
        self._api = api
        self._session = session
        self._notifier = notifier
        self.bookings: list[Booking] = []

    async def load(self) -> list[Booking]:
        user = self._session.user
        if user is None:
            self.bookings = []
            return self.bookings
        response = await self._api.get_bookings(user.id)
        if not response.success:
            self._notifier.error("Failed to load bookings")
            return self.bookings
        self.bookings = [Booking.model_validate(b) for b in response.data["bookings"]]
        return self.bookings

    def view(
        self,
        status: BookingStatus | str = ALL_STATUSES,
        search: str = "",
        sort_by: SortKey | str = SortKey.DATE,
    ) -> list[Booking]:
        """Filtered and sorted bookings.

        ``search`` matches any line's title or location, case-insensitively.
        Date sorts newest first, price highest first, status alphabetically.
        """
        status_value = status.value if isinstance(status, BookingStatus) else status
        term = search.strip().lower()

        def matches(booking: Booking) -> bool:
            if status_value != ALL_STATUSES and booking.status.value != status_value:
                return False
            if not term:
                return True
            return any(term in line.title.lower() or term in line.location.lower()
                       for line in booking.items)

        result = [b for b in self.bookings if matches(b)]
        key = SortKey(sort_by)
        if key == SortKey.DATE:
            result.sort(key=lambda b: b.created_at, reverse=True)
        elif key == SortKey.PRICE:
            result.sort(key=lambda b: b.total_amount, reverse=True)
        else:
            result.sort(key=lambda b: b.status.value)
        return result

    async def cancel(self, booking_id: str) -> bool:
        """Cancel a booking. Only pending bookings can be cancelled."""
        response = await self._api.update_booking(
            booking_id, {"status": BookingStatus.CANCELLED.value}
        )
        if not response.success:
            self._notifier.error(response.error or "Failed to cancel booking")
            return False
        updated = Booking.model_validate(response.data["booking"])
        self.bookings = [updated if b.id == booking_id else b for b in self.bookings]
        self._notifier.success("Booking cancelled")
        return True

    def find(self, booking_id: str) -> Optional[Booking]:
        return next((b for b in self.bookings if b.id == booking_id), None)
