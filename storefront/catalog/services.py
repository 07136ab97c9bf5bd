"""Service catalog with pricing, itineraries and availability calendars."""

import logging
from typing import Optional

from storefront.catalog.availability import generate_availability
from storefront.schemas.catalog_schema import Category, Service, TimeSlot

logger = logging.getLogger(__name__)

_IMAGE_BASE = "https://images.unsplash.com/"
_CREATED_AT = "2024-01-01T00:00:00Z"
_UPDATED_AT = "2024-12-01T00:00:00Z"

SERVICE_SEED: list[dict] = [
    {
        "id": "1",
        "category": "hunting",
        "title": "Brown Bear Hunting Expedition",
        "supplier": "Kamchatka Outfitters",
        "location": "Central Kamchatka",
        "duration": "7 days",
        "group_size": "2-4 people",
        "price": 4500,
        "original_price": 5200,
        "rating": 4.9,
        "reviews": 67,
        "images": [
            _IMAGE_BASE + "photo-1612257460705-e0d24b7a4808",
            _IMAGE_BASE + "photo-1738778703204-af2bfbb62a5e",
            _IMAGE_BASE + "photo-1704739410998-564ae85cc537",
        ],
        "tags": ["Premium", "All-Inclusive", "Expert Guide"],
        "featured": True,
        "description": (
            "Experience the ultimate wilderness adventure in Kamchatka's pristine landscape. "
            "Our expert guides ensure your safety while providing an unforgettable journey "
            "through one of Earth's last frontiers."
        ),
        "highlights": [
            "Expert local guides with 15+ years experience",
            "All necessary equipment and safety gear included",
            "Meals and accommodation provided",
            "Small group sizes for personalized experience",
        ],
        "included": [
            "Professional guide services",
            "All meals during expedition",
            "Accommodation in wilderness lodges",
            "Transportation to/from base camp",
        ],
        "not_included": [
            "International flights to Kamchatka",
            "Personal equipment and clothing",
            "Travel insurance",
        ],
        "itinerary": [
            {"day": 1, "title": "Arrival & Orientation",
             "description": "Meet your guide, equipment check and safety briefing."},
            {"day": 2, "title": "Journey to Base Camp",
             "description": "Helicopter transfer to the remote wilderness camp."},
            {"day": 3, "title": "Full Day Adventure",
             "description": "Full day of tracking with expert guidance."},
        ],
        "supplier_id": "supplier-1",
        "supplier_response_time": 10,
    },
    {
        "id": "2",
        "category": "fishing",
        "title": "Salmon Run Fishing Tour",
        "supplier": "Pacific Adventures",
        "location": "Kronotsky River",
        "duration": "3 days",
        "group_size": "4-8 people",
        "price": 890,
        "rating": 4.8,
        "reviews": 124,
        "images": [
            _IMAGE_BASE + "photo-1719754521965-c54b6aa1f34d",
            _IMAGE_BASE + "photo-1612257460705-e0d24b7a4808",
        ],
        "tags": ["Popular", "Equipment Included"],
        "description": (
            "Join us for the spectacular salmon run in Kamchatka's pristine rivers. "
            "Experience world-class fishing in one of the most remote locations on Earth."
        ),
        "highlights": ["World-class salmon fishing", "Professional fishing guides",
                       "All equipment provided"],
        "included": ["Professional fishing guide", "All fishing equipment",
                     "Meals and accommodation", "Fishing licenses"],
        "not_included": ["International flights", "Personal clothing", "Travel insurance"],
        "itinerary": [
            {"day": 1, "title": "Arrival & Setup",
             "description": "Arrive at fishing camp and first fishing session."},
            {"day": 2, "title": "Full Day Fishing",
             "description": "Early morning and evening sessions at prime locations."},
            {"day": 3, "title": "Final Session & Departure",
             "description": "Morning fishing and departure back to the city."},
        ],
        "supplier_id": "supplier-2",
        "supplier_response_time": 15,
    },
    {
        "id": "3",
        "category": "recreation",
        "title": "Luxury Wilderness Lodge",
        "supplier": "Kamchatka Retreats",
        "location": "Valley of Geysers",
        "duration": "5 days",
        "group_size": "2-6 people",
        "price": 1850,
        "rating": 4.9,
        "reviews": 43,
        "images": [_IMAGE_BASE + "photo-1704739410998-564ae85cc537"],
        "tags": ["Luxury", "Spa Services", "All-Inclusive"],
        "featured": True,
        "description": (
            "Unwind in luxury while surrounded by Kamchatka's volcanic landscape. "
            "Our exclusive lodge offers world-class amenities in pristine wilderness."
        ),
        "highlights": ["Thermal spring spa", "Gourmet local cuisine", "Guided geyser walks"],
        "included": ["Lodge accommodation", "All meals", "Spa access", "Helicopter transfer"],
        "not_included": ["International flights", "Alcoholic beverages"],
        "itinerary": [
            {"day": 1, "title": "Arrival",
             "description": "Helicopter transfer to the lodge and welcome dinner."},
            {"day": 2, "title": "Valley of Geysers",
             "description": "Guided walk through the geyser field."},
        ],
        "supplier_id": "supplier-3",
        "supplier_response_time": 5,
    },
    {
        "id": "4",
        "category": "tours",
        "title": "Volcano Helicopter Tour",
        "supplier": "Sky Adventures",
        "location": "Multiple Volcanoes",
        "duration": "1 day",
        "group_size": "2-6 people",
        "price": 1200,
        "rating": 4.7,
        "reviews": 89,
        "images": [_IMAGE_BASE + "photo-1738778703204-af2bfbb62a5e"],
        "tags": ["Adventure", "Photography"],
        "description": (
            "Soar above Kamchatka's active volcanoes in this breathtaking helicopter tour. "
            "Witness the raw power of nature from a bird's eye view."
        ),
        "highlights": ["Flyover of active craters", "Landing at a caldera lake"],
        "included": ["Helicopter flight", "Lunch", "Park fees"],
        "not_included": ["Hotel transfers", "Travel insurance"],
        "itinerary": [
            {"day": 1, "title": "Volcano Flight",
             "description": "Full day flight with two landings."},
        ],
        "supplier_id": "supplier-4",
        "supplier_response_time": 12,
    },
    {
        "id": "5",
        "category": "hunting",
        "title": "Wild Boar Hunting",
        "supplier": "Taiga Hunters",
        "location": "Southern Kamchatka",
        "duration": "4 days",
        "group_size": "2-6 people",
        "price": 2100,
        "rating": 4.6,
        "reviews": 31,
        "images": [_IMAGE_BASE + "photo-1612257460705-e0d24b7a4808"],
        "tags": ["Moderate", "Equipment Included"],
        "description": (
            "Experience traditional wild boar hunting in Kamchatka's southern forests. "
            "Perfect for hunters of all skill levels."
        ),
        "highlights": ["Experienced taiga guides", "Suitable for all skill levels"],
        "included": ["Guide services", "Hunting licenses", "Meals and lodging"],
        "not_included": ["Firearm transport permits", "Travel insurance"],
        "itinerary": [
            {"day": 1, "title": "Arrival & Briefing",
             "description": "Safety briefing and range practice."},
            {"day": 2, "title": "Forest Hunt",
             "description": "Full day in the southern forests."},
        ],
        "supplier_id": "supplier-5",
        "supplier_response_time": 8,
    },
    {
        "id": "6",
        "category": "fishing",
        "title": "Arctic Char Expedition",
        "supplier": "Northern Waters",
        "location": "Kamchatka River",
        "duration": "6 days",
        "group_size": "3-5 people",
        "price": 1650,
        "rating": 4.8,
        "reviews": 56,
        "images": [_IMAGE_BASE + "photo-1719754521965-c54b6aa1f34d"],
        "tags": ["Premium", "Fly Fishing", "Expert Guide"],
        "description": (
            "Target Arctic char in Kamchatka's crystal-clear rivers. This premium fly "
            "fishing expedition offers unparalleled angling opportunities."
        ),
        "highlights": ["Fly fishing instruction", "Remote river sections"],
        "included": ["Professional guide", "Fly fishing gear", "Fishing licenses"],
        "not_included": ["International flights", "Personal clothing"],
        "itinerary": [
            {"day": 1, "title": "Arrival & Setup",
             "description": "Arrive at fishing lodge, equipment setup and first casting."},
            {"day": 2, "title": "River Exploration",
             "description": "Explore different river sections for Arctic char."},
            {"day": 3, "title": "Prime Fishing",
             "description": "Visit the best fishing spots with expert guidance."},
        ],
        "supplier_id": "supplier-6",
        "supplier_response_time": 7,
    },
]


def _build_catalog() -> list[Service]:
    return [
        Service(
            **seed,
            availability=generate_availability(seed["id"]),
            created_at=_CREATED_AT,
            updated_at=_UPDATED_AT,
        )
        for seed in SERVICE_SEED
    ]


SERVICES: list[Service] = _build_catalog()


def reset() -> None:
    """Regenerate availability for every service. Used by tests after re-seeding."""
    SERVICES[:] = _build_catalog()


def get_all_services() -> list[Service]:
    return list(SERVICES)


def get_service_by_id(service_id: str) -> Optional[Service]:
    return next((s for s in SERVICES if s.id == service_id), None)


def get_services_by_category(category: str) -> list[Service]:
    """Services in ``category``; the pseudo-category "all" returns everything."""
    if category == "all":
        return get_all_services()
    return [s for s in SERVICES if s.category.value == category]


def search_services(query: str) -> list[Service]:
    """Case-insensitive match on title, supplier, location or any tag."""
    needle = query.lower().strip()
    return [
        s for s in SERVICES
        if needle in s.title.lower()
        or needle in s.supplier.lower()
        or needle in s.location.lower()
        or any(needle in tag.lower() for tag in s.tags)
    ]


def get_available_time_slots(service_id: str, date: str) -> list[TimeSlot]:
    """Bookable slots of one service on one date; empty for unknown service or date."""
    service = get_service_by_id(service_id)
    if service is None:
        return []
    day = service.get_availability(date)
    return day.bookable_slots() if day else []


def get_favorite_services(favorite_ids: list[str]) -> list[Service]:
    wanted = set(favorite_ids)
    return [s for s in SERVICES if s.id in wanted]


def get_categories() -> list[dict]:
    """Category filter entries with service counts, "all" first."""
    categories = [{"id": "all", "label": "All Services", "count": len(SERVICES)}]
    for category in Category:
        categories.append({
            "id": category.value,
            "label": category.value.capitalize(),
            "count": sum(1 for s in SERVICES if s.category == category),
        })
    return categories
