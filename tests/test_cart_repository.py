"""Tests for cart persistence"""
import json
from unittest.mock import Mock

import pytest
import redis

from cart_service.cart_repository import (
    CartRepository,
    RedisKeyValueStore,
    deserialize_cart,
    serialize_cart,
)
from cart_service.errors import PersistenceError
from tests.conftest import CART_KEY, make_line


def test_round_trip_preserves_lines_and_order():
    lines = [make_line(42, amount=3, name="Shoe"), make_line(7, amount=1, price=179.9)]

    assert deserialize_cart(serialize_cart(lines)) == lines


def test_serialized_format_uses_field_names():
    data = json.loads(serialize_cart([make_line(42, amount=2, name="Shoe", price=100.0)]))

    assert data == [
        {
            "product_id": 42,
            "name": "Shoe",
            "price": 100.0,
            "image_url": "https://cdn.example.com/42.jpg",
            "amount": 2,
        }
    ]


def test_save_then_load(repository):
    lines = [make_line(1), make_line(2, amount=4)]

    repository.save(lines)

    assert repository.load() == lines


@pytest.mark.parametrize(
    "blob",
    [
        b"not json",
        b'{"product_id": 1}',
        b'[{"product_id": 1, "name": "x", "price": 1.0, "amount": 0}]',
        b'[{"product_id": 1, "name": "x", "price": 1.0, "amount": 1},'
        b' {"product_id": 1, "name": "x", "price": 1.0, "amount": 2}]',
    ],
)
def test_unreadable_blob_loads_empty(kv_store, repository, blob):
    kv_store.write(CART_KEY, blob)

    assert repository.load() == []


def test_load_when_storage_unreachable_raises(caplog):
    backend = Mock()
    backend.read.side_effect = redis.ConnectionError("down")

    with pytest.raises(PersistenceError):
        CartRepository(backend, CART_KEY).load()

    assert CART_KEY in caplog.text
    backend.write.assert_not_called()


def test_save_failure_raises_persistence_error():
    backend = Mock()
    backend.write.side_effect = redis.ConnectionError("down")

    with pytest.raises(PersistenceError):
        CartRepository(backend, CART_KEY).save([make_line(1)])


def test_redis_store_writes_with_ttl():
    client = Mock()
    store = RedisKeyValueStore(client, ttl=3600)

    store.write(CART_KEY, b"[]")

    client.set.assert_called_once_with(CART_KEY, b"[]", ex=3600)


def test_redis_store_without_ttl_never_expires():
    client = Mock()

    RedisKeyValueStore(client).write(CART_KEY, b"[]")

    client.set.assert_called_once_with(CART_KEY, b"[]", ex=None)


def test_redis_store_read_accepts_decoded_strings():
    client = Mock()
    client.get.return_value = "[]"

    assert RedisKeyValueStore(client).read(CART_KEY) == b"[]"


def test_redis_store_read_missing_key():
    client = Mock()
    client.get.return_value = None

    assert RedisKeyValueStore(client).read(CART_KEY) is None
