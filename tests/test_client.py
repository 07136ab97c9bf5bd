"""Tests for the API client wrapper and the auth session."""

import httpx
import pytest

from storefront.client.api_client import ApiClient
from tests.conftest import TEST_EMAIL, TEST_PASSWORD


def mock_client(handler) -> ApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ApiClient("http://api.test/make-server", "key-123", http=http)


class TestApiClient:
    @pytest.mark.asyncio
    async def test_sends_bearer_and_if_match(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "version": 4})

        api = mock_client(handler)
        response = await api.add_to_cart("u1", {"id": "a"}, version=3)

        assert response.success
        assert response.data["version"] == 4
        assert seen[0].headers["Authorization"] == "Bearer key-123"
        assert seen[0].headers["If-Match"] == "3"
        assert seen[0].url.path == "/make-server/cart/u1"

    @pytest.mark.asyncio
    async def test_no_if_match_without_version(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"success": True})

        await mock_client(handler).clear_cart("u1")
        assert "If-Match" not in seen[0].headers
        assert seen[0].url.path == "/make-server/cart/u1/clear"

    @pytest.mark.asyncio
    async def test_server_error_message(self):
        api = mock_client(lambda r: httpx.Response(404, json={"success": False, "error": "Booking not found"}))
        response = await api.get_booking("b1")
        assert not response.success
        assert response.error == "Booking not found"
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_error_without_body(self):
        api = mock_client(lambda r: httpx.Response(502, text="bad gateway"))
        response = await api.get_bookings("u1")
        assert not response.success
        assert response.error == "Request failed"

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        response = await mock_client(handler).get_cart("u1")
        assert not response.success
        assert response.error == "Network error"
        assert response.status_code is None


class TestAuthSession:
    @pytest.mark.asyncio
    async def test_sign_up_signs_in(self, client):
        changes = []

        async def listener(user):
            changes.append(user.email if user else None)

        client.session.subscribe(listener)
        assert await client.session.sign_up(TEST_EMAIL, TEST_PASSWORD, "Anna Petrova")
        assert client.session.is_authenticated
        assert client.session.user.display_name == "Anna Petrova"
        assert changes == [TEST_EMAIL]

        await client.session.sign_out()
        assert not client.session.is_authenticated
        assert changes == [TEST_EMAIL, None]
        assert client.notifier.last.message == "Signed out"

        await client.session.sign_out()
        assert changes == [TEST_EMAIL, None]

    @pytest.mark.asyncio
    async def test_duplicate_sign_up(self, signed_in_client):
        await signed_in_client.session.sign_out()
        assert not await signed_in_client.session.sign_up(TEST_EMAIL, TEST_PASSWORD, "Anna")
        assert "already been registered" in signed_in_client.notifier.last.message
        assert signed_in_client.session.user is None

    @pytest.mark.asyncio
    async def test_bad_credentials(self, signed_in_client):
        await signed_in_client.session.sign_out()
        assert not await signed_in_client.session.sign_in(TEST_EMAIL, "wrong-password")
        assert signed_in_client.notifier.last.message == "Invalid login credentials"

    @pytest.mark.asyncio
    async def test_profile_update_prefills_next_checkout(self, signed_in_client):
        client = signed_in_client
        listener_calls = []

        async def listener(user):
            listener_calls.append(user)

        client.session.subscribe(listener)
        assert await client.session.update_profile(
            phone="+79145551234", address="Lenina 1", city="Yelizovo", country="Russia"
        )
        assert client.notifier.last.message == "Profile updated"
        assert client.session.user.user_metadata["city"] == "Yelizovo"
        assert listener_calls == []

        form = client.checkout.new_form()
        assert form.get("phone") == "+79145551234"
        assert form.get("street") == "Lenina 1"
        assert form.is_complete()

    @pytest.mark.asyncio
    async def test_profile_update_requires_sign_in(self, client, sent_requests):
        assert not await client.session.update_profile(phone="+79145551234")
        assert client.notifier.auth_required_count == 1
        assert sent_requests == []


class TestCatalogRequests:
    @pytest.mark.asyncio
    async def test_services_listing_and_detail(self, client):
        listed = await client.api.get_services(category="tours")
        assert listed.success
        services = listed.data["services"]
        assert services
        assert all(s["category"] == "tours" for s in services)
        assert all("availability" not in s for s in services)

        detail = await client.api.get_service(services[0]["id"])
        assert detail.data["service"]["availability"]

    @pytest.mark.asyncio
    async def test_missing_service(self, client):
        response = await client.api.get_service("999")
        assert response.status_code == 404
        assert response.error == "Service not found"
