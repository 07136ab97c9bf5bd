"""
Checkout: turn the current cart into a booking.

The flow is payment -> booking -> clear cart. The cart is only cleared once
the booking is stored, so a failed submission can simply be retried.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from storefront.booking.payments import get_processor
from storefront.client.api_client import ApiClient
from storefront.client.cart import CartService
from storefront.client.checkout_form import CheckoutForm
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession
from storefront.schemas.booking_schema import (
    Booking,
    BookingLine,
    BookingStatus,
    PaymentMethod,
)

logger = logging.getLogger(__name__)

SIGN_IN_TO_BOOK = "Please sign in to complete your booking"


class CheckoutStep(str, Enum):
    PAYMENT = "payment"
    SUCCESS = "success"


@dataclass
class CheckoutResult:
    success: bool
    message: str = ""
    booking: Optional[Booking] = None

    @property
    def booking_id(self) -> Optional[str]:
        return self.booking.id if self.booking else None


class CheckoutService:
    def __init__(
        self,
        api: ApiClient,
        session: AuthSession,
        cart: CartService,
        notifier: Notifier,
    ) -> None:
        self._api = api
        self._session = session
        self._cart = cart
        self._notifier = notifier
        self.step = CheckoutStep.PAYMENT
        self.last_booking: Optional[Booking] = None

    def new_form(self) -> CheckoutForm:
        """Start a fresh checkout pre-filled from the signed-in account."""
        self.step = CheckoutStep.PAYMENT
        self.last_booking = None
        return CheckoutForm.for_user(self._session.user)

    def _fail(self, message: str) -> CheckoutResult:
        self._notifier.error(message)
        return CheckoutResult(False, message)

    async def submit(
        self, form: CheckoutForm, payment_method: PaymentMethod = PaymentMethod.CARD
    ) -> CheckoutResult:
        user = self._session.user
        if user is None:
            self._notifier.auth_required(SIGN_IN_TO_BOOK)
            return CheckoutResult(False, SIGN_IN_TO_BOOK)
        if not self._cart.items:
            return self._fail("Your cart is empty")
        if not form.is_complete():
            missing = ", ".join(d.display_name for d in form.missing_fields())
            return self._fail(f"Please fill in: {missing}")

        customer = form.to_customer_info()
        total = self._cart.total_amount

        payment = await get_processor(payment_method).authorize(total, customer)
        if not payment.success:
            return self._fail(payment.message or "Payment failed")

        payload = {
            "items": [BookingLine.from_cart_item(item).to_wire() for item in self._cart.items],
            "totalAmount": total,
            "paymentMethod": payment_method.value,
            "customerInfo": customer.to_wire(),
            "status": BookingStatus.PENDING.value,
            "paymentReference": payment.reference,
        }
        response = await self._api.create_booking(user.id, payload)
        if not response.success:
            logger.error("Booking submission failed: %s", response.error)
            return self._fail("Failed to create booking. Please try again.")

        booking = Booking.model_validate(response.data["booking"])
        self.last_booking = booking
        self.step = CheckoutStep.SUCCESS
        await self._cart.clear_cart()
        self._notifier.success("Booking confirmed!")
        logger.info("Booking %s created for %s", booking.id, user.id)
        return CheckoutResult(True, "Booking confirmed!", booking)
