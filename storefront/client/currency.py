"""
Display currency and exchange rates.

Prices in the catalog are in USD. Rates come from a public endpoint; when it
is unreachable, rates cached less than ``cache_ttl_sec`` ago are reused, and
after that the built-in fallback rates apply.
"""

import asyncio
import json
import logging
import time
from enum import Enum
from typing import Optional

import httpx

from storefront.client.storage import LocalStorage
from storefront.config import CurrencyConfig

logger = logging.getLogger(__name__)

CURRENCY_KEY = "currency"
RATES_CACHE_KEY = "exchangeRates"


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    RUB = "RUB"


CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.RUB: "₽",
}

FALLBACK_RATES = {
    Currency.USD: 1.0,
    Currency.EUR: 0.85,
    Currency.RUB: 95.50,
}


def _group_thousands(value: int) -> str:
    """Russian-style digit grouping with non-breaking spaces: 1 234 567."""
    return f"{value:,}".replace(",", "\u00a0")


class CurrencyService:
    def __init__(
        self,
        storage: LocalStorage,
        config: Optional[CurrencyConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._storage = storage
        self._config = config or CurrencyConfig()
        self._http = http
        self.rates: dict[Currency, float] = dict(FALLBACK_RATES)
        self.is_loading = False
        self._refresh_task: Optional[asyncio.Task] = None

        saved = storage.get_item(CURRENCY_KEY)
        self.currency = Currency(saved) if saved in {c.value for c in Currency} else Currency.USD

    def set_currency(self, currency: Currency | str) -> None:
        self.currency = Currency(currency)
        self._storage.set_item(CURRENCY_KEY, self.currency.value)

    async def _fetch(self) -> dict:
        timeout = self._config.request_timeout_sec
        if self._http is not None:
            response = await self._http.get(self._config.rates_url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(self._config.rates_url)
        response.raise_for_status()
        return response.json()

    async def update_rates(self) -> dict[Currency, float]:
        self.is_loading = True
        try:
            data = await self._fetch()
            if data.get("result") != "success" or not data.get("rates"):
                raise ValueError("Invalid API response")
            self.rates = {
                Currency.USD: 1.0,
                Currency.EUR: float(data["rates"].get("EUR") or FALLBACK_RATES[Currency.EUR]),
                Currency.RUB: float(data["rates"].get("RUB") or FALLBACK_RATES[Currency.RUB]),
            }
            self._storage.set_item(RATES_CACHE_KEY, json.dumps({
                "rates": {c.value: r for c, r in self.rates.items()},
                "lastUpdated": time.time(),
            }))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            logger.error("Failed to update exchange rates: %s", exc)
            self.rates = self._cached_rates() or dict(FALLBACK_RATES)
        finally:
            self.is_loading = False
        return self.rates

    def _cached_rates(self) -> Optional[dict[Currency, float]]:
        raw = self._storage.get_item(RATES_CACHE_KEY)
        if not raw:
            return None
        try:
            cached = json.loads(raw)
            if time.time() - cached["lastUpdated"] >= self._config.cache_ttl_sec:
                return None
            return {Currency(code): float(rate) for code, rate in cached["rates"].items()}
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.error("Failed to load cached rates: %s", exc)
            return None

    def convert_price(self, price: float, from_currency: Currency | str = Currency.USD) -> float:
        usd_price = price / self.rates[Currency(from_currency)]
        return usd_price * self.rates[self.currency]

    def format_price(self, price: float, from_currency: Currency | str = Currency.USD) -> str:
        converted = self.convert_price(price, from_currency)
        symbol = CURRENCY_SYMBOLS[self.currency]
        if self.currency == Currency.RUB:
            return f"{_group_thousands(round(converted))} {symbol}"
        return f"{symbol}{converted:.2f}"

    # ------------------------------------------------------------------ #
    # Periodic refresh
    # ------------------------------------------------------------------ #

    async def _refresh_loop(self) -> None:
        while True:
            await self.update_rates()
            await asyncio.sleep(self._config.refresh_interval_sec)

    def start(self) -> None:
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._refresh_loop())

    async def stop(self) -> None:
        if self._refresh_task is None:
            return
        self._refresh_task.cancel()
        try:
            await self._refresh_task
        except asyncio.CancelledError:
            pass
        self._refresh_task = None
