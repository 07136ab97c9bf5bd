"""Cart data models."""

from typing import Optional

from pydantic import ConfigDict, Field

from storefront.schemas.base import CamelModel


class DateRange(CamelModel):
    start_date: str
    end_date: str


class CartItem(CamelModel):
    """A reservation draft for one service, date range, slot and guest count."""
    id: str
    service_id: str
    title: str
    supplier: str
    image: str = ""
    price: float = Field(ge=0)
    duration: str = ""
    group_size: str = ""
    location: str = ""
    dates: DateRange
    guests: int = Field(ge=1)
    total_price: float = Field(ge=0)
    added_at: str
    selected_time: Optional[str] = None


class CartItemPatch(CamelModel):
    """Partial update for a stored cart item. Unset fields are left alone.

    Keys outside these fields are rejected, including ``id``, ``serviceId``
    and ``addedAt``. ``totalPrice`` is accepted but the store always
    recomputes it.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    supplier: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[str] = None
    group_size: Optional[str] = None
    location: Optional[str] = None
    dates: Optional[DateRange] = None
    guests: Optional[int] = Field(default=None, ge=1)
    total_price: Optional[float] = Field(default=None, ge=0)
    selected_time: Optional[str] = None


class CartSnapshot(CamelModel):
    """Stored cart document: the items plus a monotonically increasing version."""
    items: list[CartItem] = Field(default_factory=list)
    version: int = 0

    @property
    def total_amount(self) -> float:
        return sum(item.total_price for item in self.items)
