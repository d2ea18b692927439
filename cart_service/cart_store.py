"""
Cart Store Module

CartStore owns the authoritative in-memory cart and is the only way to read
or change it. Every mutation follows the same path:

    snapshot current cart -> build candidate -> validate (uniqueness, amount,
    stock) -> persist candidate -> publish candidate as current cart

If any step fails the current cart is left as it was, the notifier receives
a user-facing message, and the returned MutationResult carries the typed
error. Nothing is published before it is persisted.

Concurrency:
    Inventory lookups are the only await points, and the cart is copied
    before them. Operations are not serialized against each other: two calls
    racing on the same product both start from the same snapshot and the
    last one to commit wins. Callers that need strict ordering must await
    each call before issuing the next.
"""

import logging
from typing import List, Optional, Tuple

from cart_service.cart_repository import CartRepository
from cart_service.errors import (
    CartError,
    InvalidAmountError,
    LineNotFoundError,
    StockExceededError,
)
from cart_service.messages import (
    ADD_FAILED,
    DEFAULT_LOCALE,
    REMOVE_FAILED,
    STOCK_EXCEEDED,
    UPDATE_FAILED,
    get_message,
)
from cart_service.schemas import CartLine, CartSummary, MutationResult

logger = logging.getLogger(__name__)


class CartStore:
    """Validated, persisted shopping cart."""

    def __init__(
        self,
        repository: CartRepository,
        stock_service,
        product_catalog,
        notifier,
        locale: str = DEFAULT_LOCALE,
    ):
        self.repository = repository
        self.stock_service = stock_service
        self.product_catalog = product_catalog
        self.notifier = notifier
        self.locale = locale
        # No stock revalidation here: lines loaded from storage are trusted
        self._cart: Tuple[CartLine, ...] = tuple(repository.load())

    def get_cart(self) -> List[CartLine]:
        return list(self._cart)

    def summary(self) -> CartSummary:
        return CartSummary.from_lines(self.get_cart())

    async def add_product(self, product_id: int) -> MutationResult:
        """Add one unit of a product, creating its line if needed."""
        operation = "add_product"
        cart = list(self._cart)
        index = _find_line(cart, product_id)

        try:
            if index is not None:
                stock = await self.stock_service.get_stock(product_id)
                amount = cart[index].amount + 1
                if amount > stock.amount:
                    raise StockExceededError(product_id, amount, stock.amount)
                cart[index] = cart[index].with_amount(amount)
            else:
                product = await self.product_catalog.get_product(product_id)
                cart.append(product.to_cart_line())
            return self._commit(operation, cart, product_id)
        except CartError as e:
            return self._fail(operation, e, ADD_FAILED)

    def remove_product(self, product_id: int) -> MutationResult:
        """Drop a product's line entirely."""
        operation = "remove_product"
        cart = list(self._cart)

        try:
            if _find_line(cart, product_id) is None:
                raise LineNotFoundError(product_id)
            candidate = [line for line in cart if line.product_id != product_id]
            return self._commit(operation, candidate, product_id)
        except CartError as e:
            return self._fail(operation, e, REMOVE_FAILED)

    async def update_product_amount(self, product_id: int, amount: int) -> MutationResult:
        """Set the quantity of an existing line, bounded by current stock."""
        operation = "update_product_amount"
        cart = list(self._cart)
        index = _find_line(cart, product_id)

        try:
            if index is None:
                raise LineNotFoundError(product_id)
            if amount < 1:
                raise InvalidAmountError(product_id, amount)

            stock = await self.stock_service.get_stock(product_id)
            if amount > stock.amount:
                raise StockExceededError(product_id, amount, stock.amount)

            cart[index] = cart[index].with_amount(amount)
            return self._commit(operation, cart, product_id)
        except CartError as e:
            return self._fail(operation, e, UPDATE_FAILED)

    def _commit(self, operation: str, candidate: List[CartLine], product_id: int) -> MutationResult:
        # Raises PersistenceError before the candidate becomes visible
        self.repository.save(candidate)
        self._cart = tuple(candidate)
        logger.info(
            f"{operation} succeeded for product {product_id}, cart has {len(candidate)} lines",
            extra={"operation": operation, "product_id": product_id},
        )
        return MutationResult(operation=operation, cart=self.get_cart(), persisted=True)

    def _fail(self, operation: str, error: CartError, message_key: str) -> MutationResult:
        if isinstance(error, StockExceededError):
            message_key = STOCK_EXCEEDED
        logger.warning(
            f"{operation} failed: {error}",
            extra={"operation": operation, "product_id": error.product_id},
        )
        message = get_message(message_key, self.locale)
        self.notifier.notify(message)
        return MutationResult(operation=operation, cart=self.get_cart(), error=error, message=message)


def _find_line(cart: List[CartLine], product_id: int) -> Optional[int]:
    for index, line in enumerate(cart):
        if line.product_id == product_id:
            return index
    return None
