"""
Date, time slot and guest selection for a single service.

One selection holds exactly one date and at most one time slot. Picking a
new date clears the slot; a slot can only be chosen when it is bookable.
A complete selection turns into a ``CartItem`` ready for the cart.

Usage:
    selection = SlotSelection(service)
    selection.select_date("2026-11-02")
    selection.select_slot("1-2026-11-02-morning")
    selection.increment_guests()
    item = selection.to_cart_item()
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

from storefront.errors import ValidationError
from storefront.schemas.cart_schema import CartItem, DateRange
from storefront.schemas.catalog_schema import Service, TimeSlot
from storefront.utils import parse_iso_date, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_GUESTS = 2
MIN_GUESTS = 1


class SelectionError(ValidationError):
    """Raised when a date or slot cannot be selected."""


class SlotSelection:
    """Single-slot selection state for one service."""

    def __init__(self, service: Service, guests: int = DEFAULT_GUESTS) -> None:
        self.service = service
        self.selected_date: Optional[str] = None
        self.selected_slot_id: Optional[str] = None
        self.guests = max(MIN_GUESTS, guests)

    # ------------------------------------------------------------------ #
    # Dates
    # ------------------------------------------------------------------ #

    def is_date_selectable(self, date: str) -> bool:
        day = self.service.get_availability(date)
        return day is not None and day.has_bookable_slot()

    def selectable_dates(self) -> list[str]:
        return [day.date for day in self.service.availability if day.has_bookable_slot()]

    def select_date(self, date: str) -> None:
        if not self.is_date_selectable(date):
            raise SelectionError(f"{date} has no bookable time slots for '{self.service.title}'.")
        self.selected_date = date
        self.selected_slot_id = None
        logger.debug("Service %s: date %s selected", self.service.id, date)

    # ------------------------------------------------------------------ #
    # Time slots
    # ------------------------------------------------------------------ #

    def available_slots(self) -> list[TimeSlot]:
        """Bookable slots for the selected date."""
        if self.selected_date is None:
            return []
        day = self.service.get_availability(self.selected_date)
        return day.bookable_slots() if day else []

    def select_slot(self, slot_id: str) -> TimeSlot:
        """Choose the slot, replacing any previous choice."""
        if self.selected_date is None:
            raise SelectionError("Select a date before choosing a time slot.")
        slot = next((s for s in self.available_slots() if s.id == slot_id), None)
        if slot is None:
            raise SelectionError(f"Time slot '{slot_id}' is not bookable on {self.selected_date}.")
        self.selected_slot_id = slot.id
        return slot

    def clear_slot(self) -> None:
        self.selected_slot_id = None

    # ------------------------------------------------------------------ #
    # Guests and pricing
    # ------------------------------------------------------------------ #

    def set_guests(self, guests: int) -> int:
        self.guests = max(MIN_GUESTS, guests)
        return self.guests

    def increment_guests(self) -> int:
        return self.set_guests(self.guests + 1)

    def decrement_guests(self) -> int:
        return self.set_guests(self.guests - 1)

    @property
    def can_decrement(self) -> bool:
        return self.guests > MIN_GUESTS

    @property
    def total_price(self) -> float:
        return self.service.price * self.guests

    @property
    def savings(self) -> float:
        return self.service.savings(self.guests)

    @property
    def is_complete(self) -> bool:
        return self.selected_date is not None and self.selected_slot_id is not None

    def to_cart_item(self) -> CartItem:
        """Build the cart draft: the trip spans the service duration from the chosen date."""
        if not self.is_complete:
            raise SelectionError("Please select a date and time slot.")
        start = parse_iso_date(self.selected_date)
        end = start + timedelta(days=self.service.duration_days - 1)
        return CartItem(
            id=f"{self.service.id}-{uuid.uuid4().hex[:12]}",
            service_id=self.service.id,
            title=self.service.title,
            supplier=self.service.supplier,
            image=self.service.images[0] if self.service.images else "",
            price=self.service.price,
            duration=self.service.duration,
            group_size=self.service.group_size,
            location=self.service.location,
            dates=DateRange(start_date=start.isoformat(), end_date=end.isoformat()),
            guests=self.guests,
            total_price=self.total_price,
            added_at=utc_now_iso(),
            selected_time=self.selected_slot_id,
        )
