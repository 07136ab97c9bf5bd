"""Tests for the booking status lifecycle."""

import pytest

from storefront.booking.lifecycle import BookingLifecycle, InvalidTransitionError
from storefront.errors import ConflictError
from storefront.schemas.booking_schema import BookingStatus


class TestBookingLifecycle:
    def setup_method(self):
        self.lifecycle = BookingLifecycle()

    def test_initial_status(self):
        assert BookingLifecycle.INITIAL_STATUS == BookingStatus.PENDING

    @pytest.mark.parametrize("target", [
        BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.REJECTED,
    ])
    def test_pending_targets(self, target):
        assert self.lifecycle.validate(BookingStatus.PENDING, target) == target

    def test_confirmed_to_completed(self):
        assert self.lifecycle.can_transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

    def test_same_status_is_allowed(self):
        assert self.lifecycle.validate(BookingStatus.CONFIRMED, BookingStatus.CONFIRMED)

    def test_skip_to_completed_rejected(self):
        with pytest.raises(InvalidTransitionError, match="Allowed"):
            self.lifecycle.validate(BookingStatus.PENDING, BookingStatus.COMPLETED)

    def test_invalid_transition_is_conflict(self):
        with pytest.raises(ConflictError) as exc_info:
            self.lifecycle.validate(BookingStatus.CANCELLED, BookingStatus.CONFIRMED)
        assert exc_info.value.status_code == 409

    @pytest.mark.parametrize("status", [
        BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED,
    ])
    def test_terminal_statuses(self, status):
        assert self.lifecycle.is_terminal(status)

    def test_pending_not_terminal(self):
        assert not self.lifecycle.is_terminal(BookingStatus.PENDING)
