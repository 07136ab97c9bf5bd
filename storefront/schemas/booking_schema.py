"""Booking data models."""

from enum import Enum
from typing import Optional

from pydantic import Field

from storefront.schemas.base import CamelModel
from storefront.schemas.cart_schema import CartItem, DateRange


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    CARD = "card"
    SBP = "sbp"
    CRYPTO = "crypto"


class BookingLine(CamelModel):
    """Frozen copy of the cart item fields a booking keeps."""
    service_id: str
    title: str
    supplier: str
    location: str = ""
    dates: DateRange
    guests: int = Field(ge=1)
    price: float = Field(ge=0)
    total_price: float = Field(ge=0)
    selected_time: Optional[str] = None

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "BookingLine":
        return cls(
            service_id=item.service_id,
            title=item.title,
            supplier=item.supplier,
            location=item.location,
            dates=item.dates.model_copy(),
            guests=item.guests,
            price=item.price,
            total_price=item.total_price,
            selected_time=item.selected_time,
        )


class Address(CamelModel):
    street: str = ""
    city: str = ""
    country: str = ""


class CustomerInfo(CamelModel):
    name: str
    email: str
    phone: str = ""
    address: Address = Field(default_factory=Address)


class BookingCreateRequest(CamelModel):
    """Checkout submission. ``status`` is accepted but always stored as pending."""
    user_id: str = Field(min_length=1)
    items: list[BookingLine] = Field(min_length=1)
    total_amount: float = Field(ge=0)
    payment_method: PaymentMethod
    customer_info: CustomerInfo
    status: BookingStatus = BookingStatus.PENDING
    payment_reference: Optional[str] = None


class Booking(CamelModel):
    """Persisted booking record."""
    id: str
    user_id: str
    items: list[BookingLine]
    total_amount: float
    payment_method: PaymentMethod
    customer_info: CustomerInfo
    status: BookingStatus = BookingStatus.PENDING
    payment_reference: Optional[str] = None
    created_at: str
    updated_at: str


class BookingPatch(CamelModel):
    status: Optional[BookingStatus] = None
    customer_info: Optional[CustomerInfo] = None
    payment_method: Optional[PaymentMethod] = None
