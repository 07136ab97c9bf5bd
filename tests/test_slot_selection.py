"""Tests for date, slot and guest selection."""

import pytest

from storefront.catalog.slot_selection import SelectionError, SlotSelection
from tests.conftest import make_service


class TestDateSelection:
    def setup_method(self):
        self.selection = SlotSelection(make_service())

    def test_date_with_bookable_slot_is_selectable(self):
        assert self.selection.is_date_selectable("2030-01-10")

    def test_date_with_only_closed_slots_is_not_selectable(self):
        assert not self.selection.is_date_selectable("2030-01-11")

    def test_unknown_date_is_not_selectable(self):
        assert not self.selection.is_date_selectable("2030-05-05")

    def test_selectable_dates(self):
        assert self.selection.selectable_dates() == ["2030-01-10"]

    def test_select_unselectable_date_raises(self):
        with pytest.raises(SelectionError):
            self.selection.select_date("2030-01-11")
        assert self.selection.selected_date is None

    def test_new_date_clears_slot(self):
        self.selection.select_date("2030-01-10")
        self.selection.select_slot("t-2030-01-10-morning")
        self.selection.select_date("2030-01-10")
        assert self.selection.selected_slot_id is None


class TestSlotSelection:
    def setup_method(self):
        self.selection = SlotSelection(make_service())

    def test_slot_requires_date(self):
        with pytest.raises(SelectionError, match="Select a date"):
            self.selection.select_slot("t-2030-01-10-morning")

    def test_available_slots_only_bookable(self):
        self.selection.select_date("2030-01-10")
        assert [s.id for s in self.selection.available_slots()] == ["t-2030-01-10-morning"]

    def test_full_slot_rejected(self):
        self.selection.select_date("2030-01-10")
        with pytest.raises(SelectionError):
            self.selection.select_slot("t-2030-01-10-afternoon")

    def test_slot_from_other_date_rejected(self):
        self.selection.select_date("2030-01-10")
        with pytest.raises(SelectionError):
            self.selection.select_slot("t-2030-01-11-morning")

    def test_single_slot_replaces_previous(self):
        self.selection.select_date("2030-01-10")
        slot = self.selection.select_slot("t-2030-01-10-morning")
        assert slot.time == "08:00"
        self.selection.clear_slot()
        assert self.selection.selected_slot_id is None
        self.selection.select_slot("t-2030-01-10-morning")
        assert self.selection.selected_slot_id == "t-2030-01-10-morning"

    def test_no_slots_without_date(self):
        assert self.selection.available_slots() == []


class TestGuests:
    def setup_method(self):
        self.selection = SlotSelection(make_service(price=500.0, original_price=600.0))

    def test_default_two_guests(self):
        assert self.selection.guests == 2
        assert self.selection.total_price == 1000.0

    def test_increment_and_decrement(self):
        assert self.selection.increment_guests() == 3
        assert self.selection.total_price == 1500.0
        assert self.selection.decrement_guests() == 2

    def test_never_below_one(self):
        self.selection.set_guests(1)
        assert not self.selection.can_decrement
        assert self.selection.decrement_guests() == 1
        assert self.selection.set_guests(-4) == 1

    def test_savings(self):
        assert self.selection.savings == 200.0

    def test_savings_without_original_price(self):
        selection = SlotSelection(make_service(original_price=None))
        assert selection.savings == 0.0


class TestToCartItem:
    def test_incomplete_selection_raises(self):
        selection = SlotSelection(make_service())
        with pytest.raises(SelectionError):
            selection.to_cart_item()

    def test_builds_item_from_selection(self):
        selection = SlotSelection(make_service(duration="3 days"))
        selection.select_date("2030-01-10")
        selection.select_slot("t-2030-01-10-morning")
        selection.increment_guests()
        item = selection.to_cart_item()

        assert item.service_id == "t"
        assert item.id.startswith("t-")
        assert item.image == "https://images.example/one.jpg"
        assert item.dates.start_date == "2030-01-10"
        assert item.dates.end_date == "2030-01-12"
        assert item.guests == 3
        assert item.total_price == item.price * item.guests
        assert item.selected_time == "t-2030-01-10-morning"

    def test_single_day_service_ends_same_day(self):
        selection = SlotSelection(make_service(duration="1 day"))
        selection.select_date("2030-01-10")
        selection.select_slot("t-2030-01-10-morning")
        item = selection.to_cart_item()
        assert item.dates.end_date == item.dates.start_date

    def test_item_ids_unique(self):
        selection = SlotSelection(make_service())
        selection.select_date("2030-01-10")
        selection.select_slot("t-2030-01-10-morning")
        assert selection.to_cart_item().id != selection.to_cart_item().id
