"""Shared test fixtures and helpers."""

from typing import Optional

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from storefront.api.app import create_app
from storefront.client.app import build_client
from storefront.client.storage import MemoryStorage
from storefront.config import settings
from storefront.container import build_backend
from storefront.schemas.cart_schema import CartItem, DateRange
from storefront.schemas.catalog_schema import Period, Service, ServiceAvailability, TimeSlot
from storefront.store.booking_store import BookingStore
from storefront.store.cart_store import CartStore
from storefront.store.kv_store import InMemoryKVStore
from storefront.store.user_store import UserStore

PREFIX = settings.api.path_prefix
AUTH_HEADERS = {"Authorization": f"Bearer {settings.api.public_key}"}
TEST_HOST = "http://testserver"
TEST_EMAIL = "anna@example.com"
TEST_PASSWORD = "secret123"


def make_cart_item(
    item_id: str = "1-abc",
    price: float = 500.0,
    guests: int = 2,
    service_id: str = "1",
    title: str = "Brown Bear Hunting Expedition",
    selected_time: Optional[str] = "1-2030-01-10-morning",
) -> CartItem:
    """Helper to create a CartItem with a consistent total."""
    return CartItem(
        id=item_id,
        service_id=service_id,
        title=title,
        supplier="Kamchatka Outfitters",
        image="https://images.example/bear.jpg",
        price=price,
        duration="7 days",
        group_size="2-4 people",
        location="Central Kamchatka",
        dates=DateRange(start_date="2030-01-10", end_date="2030-01-16"),
        guests=guests,
        total_price=price * guests,
        added_at="2030-01-01T00:00:00.000Z",
        selected_time=selected_time,
    )


def make_slot(
    slot_id: str,
    period: Period = Period.MORNING,
    available: bool = True,
    capacity: int = 6,
    booked: int = 0,
) -> TimeSlot:
    times = {Period.MORNING: "08:00", Period.AFTERNOON: "14:00",
             Period.EVENING: "18:00", Period.NIGHT: "22:00"}
    return TimeSlot(
        id=slot_id, time=times[period], period=period,
        available=available, capacity=capacity, booked=booked,
    )


def make_service(
    availability: Optional[list[ServiceAvailability]] = None,
    price: float = 500.0,
    original_price: Optional[float] = 600.0,
    duration: str = "3 days",
) -> Service:
    """A small service with a hand-built calendar.

    Default calendar: 2030-01-10 has an open morning and a full afternoon;
    2030-01-11 has only a closed slot.
    """
    if availability is None:
        availability = [
            ServiceAvailability.from_slots("2030-01-10", [
                make_slot("t-2030-01-10-morning", Period.MORNING, booked=2),
                make_slot("t-2030-01-10-afternoon", Period.AFTERNOON, booked=6),
            ]),
            ServiceAvailability.from_slots("2030-01-11", [
                make_slot("t-2030-01-11-morning", Period.MORNING, available=False),
            ]),
        ]
    return Service(
        id="t",
        category="tours",
        title="Test Tour",
        supplier="Test Supplier",
        location="Test Valley",
        duration=duration,
        group_size="1-6 people",
        price=price,
        original_price=original_price,
        images=["https://images.example/one.jpg", "https://images.example/two.jpg"],
        availability=availability,
    )


@pytest.fixture
def kv_store():
    return InMemoryKVStore()


@pytest.fixture
def cart_store(kv_store):
    return CartStore(kv_store, max_retries=3)


@pytest.fixture
def booking_store(kv_store):
    return BookingStore(kv_store)


@pytest.fixture
def user_store(kv_store):
    return UserStore(kv_store)


@pytest.fixture
def backend(kv_store):
    return build_backend(store=kv_store)


@pytest.fixture
def app(backend):
    return create_app(backend)


@pytest.fixture
def api(app):
    """Synchronous HTTP client with the public key already attached."""
    return TestClient(app, headers=AUTH_HEADERS)


@pytest.fixture
def sent_requests():
    """Every outgoing request the client services make, in order."""
    return []


@pytest_asyncio.fixture
async def http(app, sent_requests):
    async def record(request: httpx.Request) -> None:
        sent_requests.append(request)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url=TEST_HOST,
        event_hooks={"request": [record]},
    ) as client:
        yield client


@pytest.fixture
def client(http):
    return build_client(http=http, storage=MemoryStorage(), base_url=f"{TEST_HOST}{PREFIX}")


@pytest_asyncio.fixture
async def signed_in_client(client):
    assert await client.session.sign_up(TEST_EMAIL, TEST_PASSWORD, "Anna Petrova")
    return client
