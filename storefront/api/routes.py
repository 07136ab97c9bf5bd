"""Storefront HTTP endpoints: signup, cart, bookings and catalog reads."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from storefront.api.deps import expected_version, get_backend, require_public_key
from storefront.catalog.services import (
    get_service_by_id,
    get_services_by_category,
    search_services,
)
from storefront.container import Backend
from storefront.errors import NotFoundError
from storefront.schemas.booking_schema import BookingCreateRequest, BookingPatch
from storefront.schemas.cart_schema import CartItem, CartItemPatch
from storefront.schemas.user_schema import ProfileUpdate, SigninRequest, SignupRequest

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_public_key)])


# ================= AUTH =================

@router.post("/signup", tags=["Auth"])
async def signup(data: SignupRequest, backend: Backend = Depends(get_backend)):
    user = await backend.users.create_user(data)
    return {"success": True, "user": user.to_wire()}


@router.post("/signin", tags=["Auth"])
async def signin(data: SigninRequest, backend: Backend = Depends(get_backend)):
    user = await backend.users.authenticate(data)
    return {"success": True, "user": user.to_wire()}


@router.put("/profile/{user_id}", tags=["Auth"])
async def update_profile(
    user_id: str, data: ProfileUpdate, backend: Backend = Depends(get_backend)
):
    user = await backend.users.update_metadata(user_id, data.model_dump(exclude_unset=True))
    return {"success": True, "user": user.to_wire()}


# ================= CART =================

@router.get("/cart/{user_id}", tags=["Cart"])
async def get_cart(user_id: str, backend: Backend = Depends(get_backend)):
    snapshot = await backend.carts.load(user_id)
    return snapshot.to_wire()


@router.post("/cart/{user_id}", tags=["Cart"])
async def add_to_cart(
    user_id: str,
    item: CartItem,
    version: Optional[int] = Depends(expected_version),
    backend: Backend = Depends(get_backend),
):
    snapshot = await backend.carts.add_item(user_id, item, version)
    return {"success": True, "version": snapshot.version}


@router.put("/cart/{user_id}/{item_id}", tags=["Cart"])
async def update_cart_item(
    user_id: str,
    item_id: str,
    patch: CartItemPatch,
    version: Optional[int] = Depends(expected_version),
    backend: Backend = Depends(get_backend),
):
    snapshot = await backend.carts.update_item(user_id, item_id, patch, version)
    return {"success": True, "version": snapshot.version}


# Registered before the item route so "clear" is never taken for an item id.
@router.delete("/cart/{user_id}/clear", tags=["Cart"])
async def clear_cart(
    user_id: str,
    version: Optional[int] = Depends(expected_version),
    backend: Backend = Depends(get_backend),
):
    snapshot = await backend.carts.clear(user_id, version)
    return {"success": True, "version": snapshot.version}


@router.delete("/cart/{user_id}/{item_id}", tags=["Cart"])
async def remove_from_cart(
    user_id: str,
    item_id: str,
    version: Optional[int] = Depends(expected_version),
    backend: Backend = Depends(get_backend),
):
    snapshot = await backend.carts.remove_item(user_id, item_id, version)
    return {"success": True, "version": snapshot.version}


# ================= BOOKINGS =================

@router.post("/bookings", tags=["Bookings"])
async def create_booking(data: BookingCreateRequest, backend: Backend = Depends(get_backend)):
    booking = await backend.bookings.create(data)
    return {"success": True, "bookingId": booking.id, "booking": booking.to_wire()}


@router.get("/bookings/{user_id}", tags=["Bookings"])
async def list_bookings(user_id: str, backend: Backend = Depends(get_backend)):
    bookings = await backend.bookings.list_for_user(user_id)
    return {"bookings": [b.to_wire() for b in bookings]}


@router.get("/booking/{booking_id}", tags=["Bookings"])
async def get_booking(booking_id: str, backend: Backend = Depends(get_backend)):
    booking = await backend.bookings.get(booking_id)
    return {"booking": booking.to_wire()}


@router.put("/booking/{booking_id}", tags=["Bookings"])
async def update_booking(
    booking_id: str, patch: BookingPatch, backend: Backend = Depends(get_backend)
):
    booking = await backend.bookings.update(booking_id, patch)
    return {"success": True, "booking": booking.to_wire()}


# ================= CATALOG =================

@router.get("/services", tags=["Catalog"])
async def list_services(category: str = "all", q: Optional[str] = None):
    services = search_services(q) if q else get_services_by_category(category)
    if q and category != "all":
        services = [s for s in services if s.category.value == category]
    return {"services": [s.to_wire(exclude={"availability"}) for s in services]}


@router.get("/services/{service_id}", tags=["Catalog"])
async def get_service(service_id: str):
    service = get_service_by_id(service_id)
    if service is None:
        raise NotFoundError("Service not found")
    return {"service": service.to_wire()}
