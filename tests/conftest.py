"""Pytest configuration and fixtures"""
import asyncio
from typing import Dict, List, Optional

import pytest

from cart_service.cart_repository import CartRepository, InMemoryKeyValueStore, serialize_cart
from cart_service.cart_store import CartStore
from cart_service.errors import InventoryUnavailableError, ProductNotFoundError
from cart_service.schemas import CartLine, ProductInfo, StockInfo

CART_KEY = "@RocketShoes:cart"


class RecordingNotifier:
    """Notifier that keeps every message it receives"""

    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


class FakeInventory:
    """In-process stand-in for the inventory HTTP API"""

    def __init__(self, products: Optional[Dict[int, ProductInfo]] = None, stock: Optional[Dict[int, int]] = None):
        self.products = products or {}
        self.stock = stock or {}
        self.unreachable = False
        # When set, lookups wait on it so tests can observe a mutation mid-flight
        self.gate: Optional[asyncio.Event] = None
        self.stock_calls: List[int] = []
        self.product_calls: List[int] = []

    async def get_stock(self, product_id: int) -> StockInfo:
        self.stock_calls.append(product_id)
        await self._wait_for_gate()
        if self.unreachable:
            raise InventoryUnavailableError("Inventory service unreachable", product_id)
        if product_id not in self.stock:
            raise ProductNotFoundError(product_id)
        return StockInfo(product_id=product_id, amount=self.stock[product_id])

    async def get_product(self, product_id: int) -> ProductInfo:
        self.product_calls.append(product_id)
        await self._wait_for_gate()
        if self.unreachable:
            raise InventoryUnavailableError("Inventory service unreachable", product_id)
        if product_id not in self.products:
            raise ProductNotFoundError(product_id)
        return self.products[product_id]

    async def _wait_for_gate(self) -> None:
        if self.gate is not None:
            await self.gate.wait()


def make_line(product_id: int, amount: int = 1, name: Optional[str] = None, price: float = 100.0) -> CartLine:
    return CartLine(
        product_id=product_id,
        name=name or f"Product {product_id}",
        price=price,
        image_url=f"https://cdn.example.com/{product_id}.jpg",
        amount=amount,
    )


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(kv_store):
    return CartRepository(kv_store, CART_KEY)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def inventory():
    return FakeInventory(
        products={
            42: ProductInfo(id=42, name="Shoe", price=100.0, image_url="https://cdn.example.com/shoe.jpg"),
            7: ProductInfo(id=7, name="Sneaker", price=179.9, image_url="https://cdn.example.com/sneaker.jpg"),
            3: ProductInfo(id=3, name="Boot", price=219.9, image_url="https://cdn.example.com/boot.jpg"),
        },
        stock={42: 5, 7: 3, 3: 2},
    )


@pytest.fixture
def make_store(kv_store, repository, inventory, notifier):
    """Build a CartStore whose storage already holds the given lines"""

    def _make(lines: Optional[List[CartLine]] = None, locale: str = "en") -> CartStore:
        if lines is not None:
            kv_store.write(CART_KEY, serialize_cart(lines))
        return CartStore(repository, inventory, inventory, notifier, locale=locale)

    return _make
