"""
Error taxonomy for cart operations.

CartError
 +-- CartValidationError   the request conflicts with the cart or with stock
 |    +-- LineNotFoundError
 |    +-- InvalidAmountError
 |    +-- StockExceededError
 +-- DependencyError       the inventory service could not answer
 |    +-- ProductNotFoundError
 |    +-- InventoryUnavailableError
 +-- PersistenceError      the cart could not be written to storage

CartStore catches these at the operation boundary; they reach callers only as
`MutationResult.error`.
"""

from typing import Optional


class CartError(Exception):
    """Base class for every recoverable cart failure."""

    def __init__(self, message: str, product_id: Optional[int] = None):
        super().__init__(message)
        self.product_id = product_id


class CartValidationError(CartError):
    pass


class LineNotFoundError(CartValidationError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not in the cart", product_id)


class InvalidAmountError(CartValidationError):
    def __init__(self, product_id: int, amount: int):
        super().__init__(f"Invalid amount {amount} for product {product_id}", product_id)
        self.amount = amount


class StockExceededError(CartValidationError):
    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Requested {requested} units of product {product_id}, only {available} in stock",
            product_id,
        )
        self.requested = requested
        self.available = available


class DependencyError(CartError):
    pass


class ProductNotFoundError(DependencyError):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} not found in inventory", product_id)


class InventoryUnavailableError(DependencyError):
    pass


class PersistenceError(CartError):
    pass
