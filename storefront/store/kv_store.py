"""
Generic string key-value store used for carts, bookings and users.

Two backends share one interface: an in-process dict for development and
tests, and Redis for deployment. Besides get/set/delete the interface has a
compare-and-set primitive, which the cart and booking index writers use to
detect concurrent modification.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import WatchError

from storefront.config import StoreConfig

logger = logging.getLogger(__name__)


class KVStore(ABC):
    """Minimal async string key-value interface."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]: ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def compare_and_set(
        self, key: str, expected: Optional[str], value: Optional[str]
    ) -> bool:
        """Write ``value`` (or delete when None) only if the key still holds ``expected``.

        ``expected=None`` means the key must be absent. Returns False when
        another writer got there first.
        """

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class InMemoryKVStore(KVStore):
    """Dict-backed store; all operations run under one lock."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._data[key] = value

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def compare_and_set(
        self, key: str, expected: Optional[str], value: Optional[str]
    ) -> bool:
        async with self._lock:
            if self._data.get(key) != expected:
                return False
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value
            return True

    def keys(self) -> list[str]:
        return list(self._data)


class RedisKVStore(KVStore):
    """Redis-backed store. Compare-and-set uses WATCH/MULTI/EXEC."""

    def __init__(self, url: str, client: Optional[redis.Redis] = None) -> None:
        self._client = client or redis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        return await self._client.get(key)

    async def set(self, key: str, value: str) -> None:
        await self._client.set(key, value)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def compare_and_set(
        self, key: str, expected: Optional[str], value: Optional[str]
    ) -> bool:
        async with self._client.pipeline(transaction=True) as pipe:
            try:
                await pipe.watch(key)
                current = await pipe.get(key)
                if current != expected:
                    await pipe.unwatch()
                    return False
                pipe.multi()
                if value is None:
                    pipe.delete(key)
                else:
                    pipe.set(key, value)
                await pipe.execute()
                return True
            except WatchError:
                logger.debug("CAS on %s lost to a concurrent writer", key)
                return False

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()


def create_store(config: StoreConfig) -> KVStore:
    """Instantiate the configured backend."""
    if config.backend == "redis":
        logger.info("Using Redis key-value store at %s", config.redis_url)
        return RedisKVStore(config.redis_url)
    logger.info("Using in-memory key-value store")
    return InMemoryKVStore()
