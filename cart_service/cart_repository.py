"""
Cart Repository Module

Persistence for the cart blob. The cart lives under one fixed key of a
key/value store as a JSON array of line records, in cart order:

    Key: "@RocketShoes:cart"
    Value: '[{"product_id": 42, "name": "Shoe", "price": 100.0,
              "image_url": "https://...", "amount": 1}]'

Storage backends expose `read(key) -> Optional[bytes]` and `write(key, data)`:
    - RedisKeyValueStore: Redis, optional TTL refreshed on every write
    - InMemoryKeyValueStore: process-local dict for development and tests

CartRepository sits on top of a backend and turns lines into bytes and back.
A blob that fails to decode or validate is treated as an empty cart.
"""

import logging
from typing import Dict, List, Optional

import redis
from pydantic import TypeAdapter, ValidationError

from cart_service.errors import PersistenceError
from cart_service.schemas import CartLine

logger = logging.getLogger(__name__)

_cart_adapter = TypeAdapter(List[CartLine])


def serialize_cart(lines: List[CartLine]) -> bytes:
    return _cart_adapter.dump_json(list(lines))


def deserialize_cart(data: bytes) -> List[CartLine]:
    return _cart_adapter.validate_json(data)


class RedisKeyValueStore:
    """Byte storage backed by Redis."""

    def __init__(self, redis_client: redis.Redis, ttl: Optional[int] = None):
        self.redis = redis_client
        self.ttl = ttl

    def read(self, key: str) -> Optional[bytes]:
        value = self.redis.get(key)
        if isinstance(value, str):
            # Clients created with decode_responses=True hand back text
            return value.encode("utf-8")
        return value

    def write(self, key: str, data: bytes) -> None:
        self.redis.set(key, data, ex=self.ttl)


class InMemoryKeyValueStore:
    """Byte storage kept in a dict; lost when the process exits."""

    def __init__(self):
        self._store: Dict[str, bytes] = {}

    def read(self, key: str) -> Optional[bytes]:
        return self._store.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._store[key] = bytes(data)


class CartRepository:
    """Loads and saves the cart under a single storage key."""

    def __init__(self, store, key: str):
        self.store = store
        self.key = key

    def load(self) -> List[CartLine]:
        """
        Return the stored cart, or an empty one if absent or unreadable.

        Raises PersistenceError if the backend cannot be read: an empty cart
        here would overwrite the stored one on the next save.
        """
        try:
            data = self.store.read(self.key)
        except redis.RedisError as e:
            logger.error(f"Failed to read cart stored under {self.key}: {e}")
            raise PersistenceError(f"Failed to load cart: {e}") from e

        if data is None:
            return []

        try:
            lines = deserialize_cart(data)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cart stored under {self.key}: {e.error_count()} errors")
            return []

        if len({line.product_id for line in lines}) != len(lines):
            logger.warning(f"Discarding cart stored under {self.key}: duplicate products")
            return []

        logger.info(f"Loaded cart with {len(lines)} lines")
        return lines

    def save(self, lines: List[CartLine]) -> None:
        """Write the cart. Raises PersistenceError if the backend fails."""
        try:
            self.store.write(self.key, serialize_cart(lines))
        except redis.RedisError as e:
            logger.error(f"Failed to write cart to storage: {e}")
            raise PersistenceError(f"Failed to persist cart: {e}") from e
