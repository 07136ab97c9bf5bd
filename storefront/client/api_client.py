"""
Async HTTP client for the storefront backend.

Every call returns an ``ApiResponse``; HTTP errors and network failures are
collapsed into ``success=False`` with a human-readable message and never
raised, so callers only have one failure shape to handle.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    success: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` with the storefront endpoints."""

    def __init__(
        self,
        base_url: str,
        public_key: str,
        http: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {public_key}",
        }
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._owns_http = http is None

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self._http.request(
                method, url, json=json, headers={**self._headers, **(headers or {})}
            )
        except httpx.HTTPError as exc:
            logger.error("Network error [%s %s]: %s", method, endpoint, exc)
            return ApiResponse(False, error="Network error")

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            logger.error("API error [%s %s]: %s %s", method, endpoint, response.status_code, data)
            error = data.get("error") if isinstance(data, dict) else None
            return ApiResponse(False, data, error or "Request failed", response.status_code)

        return ApiResponse(True, data, status_code=response.status_code)

    @staticmethod
    def _version_header(version: Optional[int]) -> Optional[dict[str, str]]:
        return {"If-Match": str(version)} if version is not None else None

    # -------- CATALOG --------

    async def get_services(self, category: str = "all") -> ApiResponse:
        return await self._request("GET", f"/services?category={category}")

    async def get_service(self, service_id: str) -> ApiResponse:
        return await self._request("GET", f"/services/{service_id}")

    # -------- CART --------

    async def get_cart(self, user_id: str) -> ApiResponse:
        return await self._request("GET", f"/cart/{user_id}")

    async def add_to_cart(self, user_id: str, item: dict, version: Optional[int] = None) -> ApiResponse:
        return await self._request(
            "POST", f"/cart/{user_id}", json=item, headers=self._version_header(version)
        )

    async def update_cart_item(
        self, user_id: str, item_id: str, data: dict, version: Optional[int] = None
    ) -> ApiResponse:
        return await self._request(
            "PUT", f"/cart/{user_id}/{item_id}", json=data, headers=self._version_header(version)
        )

    async def remove_from_cart(
        self, user_id: str, item_id: str, version: Optional[int] = None
    ) -> ApiResponse:
        return await self._request(
            "DELETE", f"/cart/{user_id}/{item_id}", headers=self._version_header(version)
        )

    async def clear_cart(self, user_id: str, version: Optional[int] = None) -> ApiResponse:
        return await self._request(
            "DELETE", f"/cart/{user_id}/clear", headers=self._version_header(version)
        )

    # -------- BOOKINGS --------

    async def create_booking(self, user_id: str, booking: dict) -> ApiResponse:
        return await self._request("POST", "/bookings", json={"userId": user_id, **booking})

    async def get_bookings(self, user_id: str) -> ApiResponse:
        return await self._request("GET", f"/bookings/{user_id}")

    async def get_booking(self, booking_id: str) -> ApiResponse:
        return await self._request("GET", f"/booking/{booking_id}")

    async def update_booking(self, booking_id: str, data: dict) -> ApiResponse:
        return await self._request("PUT", f"/booking/{booking_id}", json=data)

    # -------- AUTH --------

    async def signup(self, email: str, password: str, name: str) -> ApiResponse:
        return await self._request(
            "POST", "/signup", json={"email": email, "password": password, "name": name}
        )

    async def signin(self, email: str, password: str) -> ApiResponse:
        return await self._request("POST", "/signin", json={"email": email, "password": password})

    async def update_profile(self, user_id: str, data: dict) -> ApiResponse:
        return await self._request("PUT", f"/profile/{user_id}", json=data)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
