"""
Client composition root.

``build_client`` wires the client services around one ``ApiClient``. Pass an
``httpx.AsyncClient`` to talk to an in-process app (tests, demo) instead of a
running server.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from storefront.client.api_client import ApiClient
from storefront.client.cart import CartService
from storefront.client.checkout import CheckoutService
from storefront.client.currency import CurrencyService
from storefront.client.dashboard import BookingHistory
from storefront.client.favorites import FavoritesService
from storefront.client.notifier import Notifier
from storefront.client.session import AuthSession
from storefront.client.storage import LocalStorage, MemoryStorage
from storefront.config import AppConfig, settings

logger = logging.getLogger(__name__)


@dataclass
class StorefrontClient:
    api: ApiClient
    notifier: Notifier
    session: AuthSession
    cart: CartService
    favorites: FavoritesService
    checkout: CheckoutService
    currency: CurrencyService
    history: BookingHistory

    async def aclose(self) -> None:
        await self.currency.stop()
        await self.api.aclose()


def build_client(
    config: Optional[AppConfig] = None,
    http: Optional[httpx.AsyncClient] = None,
    storage: Optional[LocalStorage] = None,
    base_url: Optional[str] = None,
    rates_http: Optional[httpx.AsyncClient] = None,
) -> StorefrontClient:
    config = config or settings
    storage = storage or MemoryStorage()
    timeout = config.client.request_timeout_sec or None

    api = ApiClient(
        base_url or config.client.base_url,
        config.api.public_key,
        http=http,
        timeout=timeout,
    )
    notifier = Notifier()
    session = AuthSession(api, notifier)
    cart = CartService(api, session, notifier)
    client = StorefrontClient(
        api=api,
        notifier=notifier,
        session=session,
        cart=cart,
        favorites=FavoritesService(storage, session, notifier),
        checkout=CheckoutService(api, session, cart, notifier),
        currency=CurrencyService(storage, config.currency, http=rates_http),
        history=BookingHistory(api, session, notifier),
    )
    logger.debug("Storefront client built for %s", api.base_url)
    return client
