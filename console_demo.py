"""
Offline console demo: a full shopping session without a running server.

The real FastAPI app runs in-process on an in-memory store and the real
client services talk to it through ``httpx.ASGITransport``. No network
calls. Designed for demo walkthroughs.

Usage:
    python console_demo.py
    python console_demo.py --scenario favorites
    python console_demo.py --scenario conflict
"""

import argparse
import asyncio
from typing import Optional

import httpx

from storefront.api.app import create_app
from storefront.catalog.services import get_service_by_id
from storefront.catalog.slot_selection import SlotSelection
from storefront.client.app import StorefrontClient, build_client
from storefront.client.currency import Currency
from storefront.config import settings
from storefront.container import build_backend
from storefront.schemas.booking_schema import PaymentMethod
from storefront.store.kv_store import InMemoryKVStore

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_HOST = "http://storefront.local"
DEMO_EMAIL = "anna@example.com"
DEMO_PASSWORD = "kamchatka"


class ShoppingSession:
    """Drives the client services against an in-process backend."""

    SCENARIOS = ("checkout", "favorites", "conflict")

    def __init__(self) -> None:
        self.backend = build_backend(store=InMemoryKVStore())
        self.app = create_app(self.backend)
        self._http: list[httpx.AsyncClient] = []

    def _new_client(self) -> StorefrontClient:
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=self.app), base_url=DEMO_HOST)
        self._http.append(http)
        return build_client(http=http, base_url=f"{DEMO_HOST}{settings.api.path_prefix}")

    def say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[shop]{RESET} {GREEN}{text}{RESET}")

    def user_do(self, text: str) -> None:
        print(f"{BLUE}{BOLD}[user]{RESET} {BLUE}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def warn(self, text: str) -> None:
        print(f"{YELLOW}{text}{RESET}")

    def error(self, text: str) -> None:
        print(f"{RED}{text}{RESET}")

    def show_cart(self, client: StorefrontClient) -> None:
        cart = client.cart
        self.system_log(f"cart v{cart.version}: {cart.item_count} item(s), total {client.currency.format_price(cart.total_amount)}")
        for item in cart.items:
            self.system_log(
                f"  {item.title} | {item.dates.start_date}..{item.dates.end_date} "
                f"| {item.guests} guest(s) | {client.currency.format_price(item.total_price)}"
            )

    async def _sign_in(self, client: StorefrontClient) -> None:
        if not await client.session.sign_in(DEMO_EMAIL, DEMO_PASSWORD):
            self.user_do(f"Sign up as {DEMO_EMAIL}")
            await client.session.sign_up(DEMO_EMAIL, DEMO_PASSWORD, "Anna Petrova")
        self.say(f"Welcome, {client.session.user.display_name}!")

    def _select(self, service_id: str, guests: int = 2) -> Optional[SlotSelection]:
        service = get_service_by_id(service_id)
        selection = SlotSelection(service)
        dates = selection.selectable_dates()
        if not dates:
            self.warn(f"No bookable dates for {service.title}")
            return None
        selection.select_date(dates[0])
        slot = selection.available_slots()[0]
        selection.select_slot(slot.id)
        selection.set_guests(guests)
        self.user_do(f"Pick {service.title} on {dates[0]} at {slot.time} for {guests} guest(s)")
        return selection

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    async def run_checkout(self) -> None:
        client = self._new_client()
        self.say("Catalog:")
        response = await client.api.get_services()
        for service in response.data["services"]:
            self.system_log(
                f"{service['id']}. {service['title']} ({service['category']}) ${service['price']:.2f}"
            )

        self.user_do("Add a tour to the cart before signing in")
        selection = self._select("2")
        await client.cart.add_to_cart(selection.to_cart_item())
        self.warn(client.notifier.last.message)

        await self._sign_in(client)
        for service_id, guests in (("1", 2), ("4", 1)):
            selection = self._select(service_id, guests)
            if selection:
                await client.cart.add_to_cart(selection.to_cart_item())
        self.show_cart(client)

        first = client.cart.items[0]
        self.user_do(f"One more guest for {first.title}")
        await client.cart.change_guests(first.id, +1)
        self.show_cart(client)

        self.user_do("Save contact details to the profile")
        await client.session.update_profile(
            phone="+7 914 555 12 34", city="Petropavlovsk-Kamchatsky", country="Russia"
        )
        form = client.checkout.new_form()
        self.system_log(f"checkout form: {form.to_dict()}")
        self.user_do("Pay by card")
        result = await client.checkout.submit(form, PaymentMethod.CARD)
        if not result.success:
            self.error(result.message)
            return
        booking = result.booking
        self.say(f"{result.message} {booking.id} ({booking.status.value}, ref {booking.payment_reference})")
        self.show_cart(client)

        await client.history.load()
        self.say(f"You have {len(client.history.bookings)} booking(s).")

        self.user_do(f"Cancel {booking.id}")
        if await client.history.cancel(booking.id):
            self.say(f"{booking.id} is now {client.history.find(booking.id).status.value}")
        else:
            self.error(client.notifier.last.message)

    async def run_favorites(self) -> None:
        client = self._new_client()
        client.favorites.toggle_favorite("3")
        self.warn(client.notifier.last.message)
        await self._sign_in(client)
        for service_id in ("3", "6", "3"):
            client.favorites.toggle_favorite(service_id)
            self.system_log(client.notifier.last.message)
        for service in client.favorites.favorite_services():
            for currency in Currency:
                client.currency.set_currency(currency)
                self.say(f"{service.title}: {client.currency.format_price(service.price)}")

    async def run_conflict(self) -> None:
        laptop, phone = self._new_client(), self._new_client()
        await self._sign_in(laptop)
        await self._sign_in(phone)
        selection = self._select("5")
        await laptop.cart.add_to_cart(selection.to_cart_item())
        await phone.cart.refresh()

        item_id = phone.cart.items[0].id
        self.user_do("Laptop: add another tour")
        await laptop.cart.add_to_cart(self._select("6").to_cart_item())
        self.user_do("Phone (stale): change guests")
        await phone.cart.change_guests(item_id, +2)
        self.warn(phone.notifier.last.message)
        self.show_cart(phone)

    async def run_scenario(self, name: str) -> None:
        print(f"\n{BOLD}=== Scenario: {name} ==={RESET}\n")
        try:
            await getattr(self, f"run_{name}")()
        finally:
            for http in self._http:
                await http.aclose()
            await self.backend.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline storefront demo")
    parser.add_argument(
        "--scenario",
        choices=ShoppingSession.SCENARIOS,
        default="checkout",
        help="Which scripted shopping session to play",
    )
    args = parser.parse_args()
    asyncio.run(ShoppingSession().run_scenario(args.scenario))


if __name__ == "__main__":
    main()
