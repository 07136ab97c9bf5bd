"""
Payment processors for checkout.

Each payment method the storefront offers (card, SBP, crypto) is a
``PaymentProcessor``. None of them settle real money yet: they accept the
amount and hand back a reference so a booking can record which method was
used. A real gateway replaces one processor without touching checkout.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from storefront.schemas.booking_schema import CustomerInfo, PaymentMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    method: PaymentMethod
    reference: str = ""
    message: str = ""


class PaymentProcessor(ABC):
    """Base class for payment methods."""

    method: PaymentMethod
    reference_prefix: str = "PAY"

    @abstractmethod
    async def authorize(self, amount: float, customer: CustomerInfo) -> PaymentResult:
        """Authorize ``amount`` for ``customer``."""

    def _reference(self) -> str:
        return f"{self.reference_prefix}-{uuid.uuid4().hex[:10].upper()}"


class SimulatedProcessor(PaymentProcessor):
    """Accepts any non-negative amount without contacting a gateway."""

    async def authorize(self, amount: float, customer: CustomerInfo) -> PaymentResult:
        if amount < 0:
            return PaymentResult(False, self.method, message=f"Invalid amount: {amount}")
        reference = self._reference()
        logger.info(
            "Simulated %s payment of %.2f for %s: %s",
            self.method.value, amount, customer.email, reference,
        )
        return PaymentResult(True, self.method, reference, "Payment accepted")


class CardProcessor(SimulatedProcessor):
    method = PaymentMethod.CARD
    reference_prefix = "CARD"


class SbpProcessor(SimulatedProcessor):
    """Russian Faster Payments System."""

    method = PaymentMethod.SBP
    reference_prefix = "SBP"


class CryptoProcessor(SimulatedProcessor):
    method = PaymentMethod.CRYPTO
    reference_prefix = "CRYPTO"


_PROCESSOR_REGISTRY: dict[PaymentMethod, Callable[[], PaymentProcessor]] = {}


def register_processor(method: PaymentMethod, factory: Callable[[], PaymentProcessor]) -> None:
    """Register (or replace) the processor factory for a payment method."""
    _PROCESSOR_REGISTRY[method] = factory
    logger.debug("Payment processor registered: %s", method.value)


def get_processor(method: PaymentMethod) -> PaymentProcessor:
    """Create the processor for ``method``.

    Raises:
        KeyError: If no processor is registered for the method.
    """
    if method not in _PROCESSOR_REGISTRY:
        registered = [m.value for m in _PROCESSOR_REGISTRY]
        raise KeyError(f"No payment processor for '{method.value}'. Available: {registered}")
    return _PROCESSOR_REGISTRY[method]()


def get_registered_methods() -> list[PaymentMethod]:
    return list(_PROCESSOR_REGISTRY)


def _auto_register() -> None:
    """Register the built-in processors. Called once at import time."""
    register_processor(PaymentMethod.CARD, CardProcessor)
    register_processor(PaymentMethod.SBP, SbpProcessor)
    register_processor(PaymentMethod.CRYPTO, CryptoProcessor)


_auto_register()
