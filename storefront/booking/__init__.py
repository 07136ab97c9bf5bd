from storefront.booking.lifecycle import BookingLifecycle, InvalidTransitionError
from storefront.booking.payments import (
    PaymentProcessor,
    PaymentResult,
    get_processor,
    get_registered_methods,
    register_processor,
)

__all__ = [
    "BookingLifecycle",
    "InvalidTransitionError",
    "PaymentProcessor",
    "PaymentResult",
    "get_processor",
    "register_processor",
    "get_registered_methods",
]
