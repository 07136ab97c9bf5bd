from storefront.store.booking_store import BookingStore
from storefront.store.cart_store import CartConflictError, CartStore
from storefront.store.kv_store import InMemoryKVStore, KVStore, RedisKVStore, create_store
from storefront.store.user_store import UserStore

__all__ = [
    "KVStore", "InMemoryKVStore", "RedisKVStore", "create_store",
    "CartStore", "CartConflictError", "BookingStore", "UserStore",
]
