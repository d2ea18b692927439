from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from cart_service.errors import CartError


class CartLine(BaseModel):
    """One product in the cart. Immutable; use `with_amount` to change quantity."""

    product_id: int
    name: str
    price: float
    image_url: str = ""
    amount: int = Field(ge=1)

    model_config = {"frozen": True}

    @property
    def subtotal(self) -> float:
        return self.price * self.amount

    def with_amount(self, amount: int) -> "CartLine":
        return self.model_copy(update={"amount": amount})


class StockInfo(BaseModel):
    """Available quantity for a product as reported by the inventory service."""

    product_id: int = Field(validation_alias=AliasChoices("product_id", "id"))
    amount: int


class ProductInfo(BaseModel):
    """Catalog metadata. Accepts `title`/`image` as sent by the product API."""

    id: int
    name: str = Field(validation_alias=AliasChoices("name", "title"))
    price: float
    image_url: str = Field(default="", validation_alias=AliasChoices("image_url", "imageUrl", "image"))

    def to_cart_line(self, amount: int = 1) -> CartLine:
        return CartLine(
            product_id=self.id,
            name=self.name,
            price=self.price,
            image_url=self.image_url,
            amount=amount,
        )


class CartSummary(BaseModel):
    """Cart contents with totals."""

    lines: List[CartLine]
    item_count: int
    total_amount: float

    @classmethod
    def from_lines(cls, lines: List[CartLine]) -> "CartSummary":
        return cls(
            lines=list(lines),
            item_count=sum(line.amount for line in lines),
            total_amount=sum(line.subtotal for line in lines),
        )


class MutationResult(BaseModel):
    """
    Outcome of a cart operation.

    `cart` is always the current cart after the operation: the new cart on
    success, the untouched one on failure. `message` is the text sent to the
    notifier on failure. `persisted` is True only when the new cart was
    written to storage.
    """

    operation: str
    cart: List[CartLine]
    error: Optional[CartError] = None
    message: Optional[str] = None
    persisted: bool = False

    model_config = {"arbitrary_types_allowed": True}

    @property
    def ok(self) -> bool:
        return self.error is None


class UpdateAmountRequest(BaseModel):
    """Request model for setting a line's quantity."""

    amount: int


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str
