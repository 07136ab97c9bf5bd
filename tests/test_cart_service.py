"""Tests for the client cart service against the in-process API."""

import pytest

from storefront.client.app import build_client
from storefront.client.cart import SIGN_IN_TO_ADD
from storefront.client.notifier import NotificationLevel
from tests.conftest import PREFIX, TEST_EMAIL, TEST_HOST, TEST_PASSWORD, make_cart_item


class TestSignedOutCart:
    @pytest.mark.asyncio
    async def test_add_without_user_makes_no_request(self, client, sent_requests):
        auth_prompts = []
        client.notifier.on_auth_required(lambda: auth_prompts.append(True))

        added = await client.cart.add_to_cart(make_cart_item("a"))

        assert not added
        assert sent_requests == []
        assert client.cart.items == []
        assert auth_prompts == [True]
        assert client.notifier.last.message == SIGN_IN_TO_ADD
        assert client.notifier.last.level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_refresh_without_user_is_empty(self, client, sent_requests):
        await client.cart.refresh()
        assert client.cart.items == []
        assert client.cart.item_count == 0
        assert sent_requests == []


class TestCartTotals:
    @pytest.mark.asyncio
    async def test_add_change_guests_remove(self, signed_in_client):
        cart = signed_in_client.cart
        assert await cart.add_to_cart(make_cart_item("a", price=500.0, guests=2))
        assert cart.item_count == 1
        assert cart.total_amount == 1000.0

        await cart.update_cart_item("a", {"guests": 3})
        assert cart.items[0].total_price == 1500.0
        assert cart.total_amount == 1500.0

        await cart.add_to_cart(make_cart_item("b", price=200.0, guests=1))
        assert cart.item_count == 2
        assert cart.total_amount == 1700.0

        await cart.remove_from_cart("a")
        assert cart.item_count == 1
        assert cart.total_amount == 200.0

    @pytest.mark.asyncio
    async def test_totals_match_line_prices_after_every_update(self, signed_in_client):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a", price=320.0, guests=1))
        for guests in (4, 2, 7):
            await cart.update_cart_item("a", {"guests": guests})
            item = cart.get_item("a")
            assert item.total_price == item.price * item.guests
            assert cart.total_amount == sum(i.total_price for i in cart.items)

    @pytest.mark.asyncio
    async def test_guests_clamped_to_one(self, signed_in_client):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a", price=500.0, guests=1))
        await cart.update_cart_item("a", {"guests": 0})
        assert cart.items[0].guests == 1
        assert cart.items[0].total_price == 500.0

    @pytest.mark.asyncio
    async def test_change_guests(self, signed_in_client):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a", price=100.0, guests=2))
        await cart.change_guests("a", +1)
        assert cart.items[0].guests == 3
        await cart.change_guests("a", -5)
        assert cart.items[0].guests == 1

    @pytest.mark.asyncio
    async def test_update_unknown_item_is_silent(self, signed_in_client, sent_requests):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a"))
        before = [i.model_dump() for i in cart.items]
        errors_before = len(signed_in_client.notifier.messages(NotificationLevel.ERROR))
        sent_before = len(sent_requests)

        updated = await cart.update_cart_item("nonexistent-id", {"guests": 5})

        assert not updated
        assert [i.model_dump() for i in cart.items] == before
        assert len(sent_requests) == sent_before
        assert len(signed_in_client.notifier.messages(NotificationLevel.ERROR)) == errors_before


class TestClearAndSession:
    @pytest.mark.asyncio
    async def test_clear_is_idempotent(self, signed_in_client):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a"))
        assert await cart.clear_cart()
        assert await cart.clear_cart()
        assert cart.items == []
        await cart.refresh()
        assert cart.items == []

    @pytest.mark.asyncio
    async def test_clear_adopts_server_version(self, signed_in_client):
        cart = signed_in_client.cart
        await cart.add_to_cart(make_cart_item("a"))
        await cart.add_to_cart(make_cart_item("b"))
        assert await cart.clear_cart()
        assert cart.version == 3
        await cart.refresh()
        assert cart.version == 3

    @pytest.mark.asyncio
    async def test_sign_out_empties_local_cart(self, signed_in_client):
        await signed_in_client.cart.add_to_cart(make_cart_item("a"))
        await signed_in_client.session.sign_out()
        assert signed_in_client.cart.items == []

    @pytest.mark.asyncio
    async def test_sign_in_loads_server_cart(self, signed_in_client, http):
        await signed_in_client.cart.add_to_cart(make_cart_item("a"))
        other = build_client(http=http, base_url=f"{TEST_HOST}{PREFIX}")
        assert await other.session.sign_in(TEST_EMAIL, TEST_PASSWORD)
        assert [i.id for i in other.cart.items] == ["a"]
        assert other.cart.version == signed_in_client.cart.version


class TestConcurrentTabs:
    @pytest.mark.asyncio
    async def test_stale_tab_gets_conflict_and_refreshes(self, signed_in_client, http):
        laptop = signed_in_client
        phone = build_client(http=http, base_url=f"{TEST_HOST}{PREFIX}")
        await phone.session.sign_in(TEST_EMAIL, TEST_PASSWORD)

        await laptop.cart.add_to_cart(make_cart_item("a", price=500.0, guests=2))
        await phone.cart.refresh()
        await laptop.cart.add_to_cart(make_cart_item("b", price=100.0, guests=1))

        updated = await phone.cart.update_cart_item("a", {"guests": 4})

        assert not updated
        assert phone.notifier.last.level == NotificationLevel.ERROR
        assert [i.id for i in phone.cart.items] == ["a", "b"]
        assert phone.cart.get_item("a").guests == 2
        assert phone.cart.version == laptop.cart.version

        assert await phone.cart.update_cart_item("a", {"guests": 4})
        assert phone.cart.get_item("a").total_price == 2000.0

    @pytest.mark.asyncio
    async def test_tab_that_missed_a_clear_conflicts(self, signed_in_client, http):
        laptop = signed_in_client
        phone = build_client(http=http, base_url=f"{TEST_HOST}{PREFIX}")
        await phone.session.sign_in(TEST_EMAIL, TEST_PASSWORD)

        await laptop.cart.add_to_cart(make_cart_item("a"))
        await phone.cart.refresh()
        await laptop.cart.clear_cart()
        await laptop.cart.add_to_cart(make_cart_item("b"))

        assert not await phone.cart.remove_from_cart("a")
        assert phone.notifier.last.level == NotificationLevel.ERROR
        assert [i.id for i in phone.cart.items] == ["b"]
        assert phone.cart.version == laptop.cart.version == 3
