"""Catalog data models: services and their availability calendars."""

from enum import Enum
from typing import Optional

from pydantic import Field

from storefront.schemas.base import CamelModel
from storefront.utils import parse_duration_days


class Category(str, Enum):
    HUNTING = "hunting"
    FISHING = "fishing"
    RECREATION = "recreation"
    TOURS = "tours"


class Period(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class ServiceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class TimeSlot(CamelModel):
    """A bookable period within one day."""
    id: str
    time: str
    period: Period
    available: bool
    capacity: int = Field(ge=0)
    booked: int = Field(ge=0)

    @property
    def is_bookable(self) -> bool:
        """The single bookability rule: open and not at capacity."""
        return self.available and self.booked < self.capacity

    @property
    def remaining(self) -> int:
        return max(self.capacity - self.booked, 0)

    @property
    def utilization(self) -> float:
        return self.booked / self.capacity if self.capacity else 1.0


class ServiceAvailability(CamelModel):
    """All time slots of one calendar date with cached capacity sums."""
    date: str
    time_slots: list[TimeSlot] = Field(default_factory=list)
    total_capacity: int = 0
    booked: int = 0

    @classmethod
    def from_slots(cls, date: str, slots: list[TimeSlot]) -> "ServiceAvailability":
        day = cls(date=date, time_slots=slots)
        day.recompute()
        return day

    def recompute(self) -> None:
        self.total_capacity = sum(slot.capacity for slot in self.time_slots)
        self.booked = sum(slot.booked for slot in self.time_slots)

    def get_slot(self, slot_id: str) -> Optional[TimeSlot]:
        return next((slot for slot in self.time_slots if slot.id == slot_id), None)

    def bookable_slots(self) -> list[TimeSlot]:
        return [slot for slot in self.time_slots if slot.is_bookable]

    def has_bookable_slot(self) -> bool:
        return any(slot.is_bookable for slot in self.time_slots)

    def record_booked(self, slot_id: str, booked: int) -> TimeSlot:
        """Set a slot's booked count and refresh the day totals."""
        if booked < 0:
            raise ValueError(f"booked must be >= 0, got {booked}")
        slot = self.get_slot(slot_id)
        if slot is None:
            raise KeyError(f"Unknown time slot '{slot_id}' on {self.date}")
        slot.booked = booked
        self.recompute()
        return slot


class ItineraryDay(CamelModel):
    day: int
    title: str
    description: str


class Service(CamelModel):
    """A bookable adventure offering."""
    id: str
    category: Category
    title: str
    supplier: str
    location: str
    duration: str
    group_size: str
    price: float = Field(ge=0)
    original_price: Optional[float] = None
    rating: float = 0.0
    reviews: int = 0
    images: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    available: bool = True
    featured: bool = False
    description: str = ""
    highlights: list[str] = Field(default_factory=list)
    included: list[str] = Field(default_factory=list)
    not_included: list[str] = Field(default_factory=list)
    itinerary: list[ItineraryDay] = Field(default_factory=list)
    availability: list[ServiceAvailability] = Field(default_factory=list)
    status: ServiceStatus = ServiceStatus.ACTIVE
    supplier_id: str = ""
    supplier_response_time: int = 0
    created_at: str = ""
    updated_at: str = ""

    @property
    def duration_days(self) -> int:
        return parse_duration_days(self.duration)

    def savings(self, guests: int) -> float:
        if self.original_price is None:
            return 0.0
        return (self.original_price - self.price) * guests

    def get_availability(self, date: str) -> Optional[ServiceAvailability]:
        return next((day for day in self.availability if day.date == date), None)
