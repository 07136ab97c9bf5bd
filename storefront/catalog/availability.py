"""
Synthetic availability calendar for catalog services.

Every service gets a rolling window of days, each with a fixed set of time
slots whose booked counts and open/closed flags are drawn from a seeded
random generator. A real inventory source can replace this module as long
as it returns the same ``ServiceAvailability`` shape.
"""

import logging
import random
from datetime import date, timedelta
from typing import NamedTuple, Optional

from storefront.config import settings
from storefront.schemas.catalog_schema import Period, ServiceAvailability, TimeSlot

logger = logging.getLogger(__name__)


class SlotTemplate(NamedTuple):
    time: str
    period: Period
    capacity: int
    # slot is open when random() exceeds this
    closed_below: float
    # booked is drawn from range(booked_ceiling)
    booked_ceiling: int


BASE_SLOTS: tuple[SlotTemplate, ...] = (
    SlotTemplate("08:00", Period.MORNING, 6, 0.2, 3),
    SlotTemplate("14:00", Period.AFTERNOON, 6, 0.3, 4),
    SlotTemplate("18:00", Period.EVENING, 4, 0.4, 2),
)
NIGHT_SLOT = SlotTemplate("22:00", Period.NIGHT, 4, 0.5, 2)

SCHEDULE_DAYS = settings.catalog.availability_days
SCHEDULE_SEED = settings.catalog.availability_seed
NIGHT_SLOT_SERVICE_IDS = frozenset(settings.catalog.night_slot_service_ids)

_rng = random.Random(SCHEDULE_SEED)


def make_slot_id(service_id: str, day: date, period: Period) -> str:
    return f"{service_id}-{day.isoformat()}-{period.value}"


def slot_templates_for(service_id: str) -> tuple[SlotTemplate, ...]:
    """Base slots, plus the night slot for services that run one."""
    if service_id in NIGHT_SLOT_SERVICE_IDS:
        return BASE_SLOTS + (NIGHT_SLOT,)
    return BASE_SLOTS


def generate_availability(
    service_id: str,
    days: Optional[int] = None,
    start: Optional[date] = None,
    rng: Optional[random.Random] = None,
) -> list[ServiceAvailability]:
    """Build one ``ServiceAvailability`` per day starting at ``start`` (default today)."""
    days = SCHEDULE_DAYS if days is None else days
    start = start or date.today()
    rng = rng or _rng
    templates = slot_templates_for(service_id)

    calendar: list[ServiceAvailability] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        slots = [
            TimeSlot(
                id=make_slot_id(service_id, day, tpl.period),
                time=tpl.time,
                period=tpl.period,
                available=rng.random() > tpl.closed_below,
                capacity=tpl.capacity,
                booked=rng.randrange(tpl.booked_ceiling),
            )
            for tpl in templates
        ]
        calendar.append(ServiceAvailability.from_slots(day.isoformat(), slots))

    logger.debug(
        "Generated %d days of availability for service %s (%d slots/day)",
        days, service_id, len(templates),
    )
    return calendar


def reset() -> None:
    """Re-seed random state for deterministic tests."""
    _rng.seed(SCHEDULE_SEED)
