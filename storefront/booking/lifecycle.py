"""
Booking status lifecycle.

A booking is created ``pending``. From there it may be confirmed and later
completed, or cancelled or rejected. Nothing in the storefront drives these
transitions on its own; the table only decides whether a status change
submitted through the booking API is legal.

Usage:
    lifecycle = BookingLifecycle()
    lifecycle.validate(BookingStatus.PENDING, BookingStatus.CONFIRMED)
"""

import logging
from dataclasses import dataclass

from storefront.errors import ConflictError
from storefront.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A single valid status change."""
    from_status: BookingStatus
    to_status: BookingStatus


class InvalidTransitionError(ConflictError):
    """Raised when a status change is not allowed from the current status."""


class BookingLifecycle:
    """Explicit table of allowed booking status changes."""

    INITIAL_STATUS = BookingStatus.PENDING

    TRANSITIONS: list[Transition] = [
        Transition(BookingStatus.PENDING, BookingStatus.CONFIRMED),
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED),
        Transition(BookingStatus.PENDING, BookingStatus.REJECTED),
        Transition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
    ]

    def allowed_targets(self, status: BookingStatus) -> list[BookingStatus]:
        return [t.to_status for t in self.TRANSITIONS if t.from_status == status]

    def can_transition(self, current: BookingStatus, target: BookingStatus) -> bool:
        return current == target or target in self.allowed_targets(current)

    def validate(self, current: BookingStatus, target: BookingStatus) -> BookingStatus:
        """
        Check a requested status change.

        Re-submitting the current status is accepted as a no-op.

        Raises:
            InvalidTransitionError: If no transition leads from ``current`` to ``target``.
        """
        if self.can_transition(current, target):
            if current != target:
                logger.debug("Booking status %s -> %s", current.value, target.value)
            return target

        valid = [s.value for s in self.allowed_targets(current)]
        raise InvalidTransitionError(
            f"Cannot change booking status from '{current.value}' to '{target.value}'. "
            f"Allowed: {valid}"
        )

    def is_terminal(self, status: BookingStatus) -> bool:
        return not self.allowed_targets(status)
