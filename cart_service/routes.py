import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from cart_service.cart_store import CartStore
from cart_service.errors import (
    DependencyError,
    InvalidAmountError,
    LineNotFoundError,
    PersistenceError,
    ProductNotFoundError,
    StockExceededError,
)
from cart_service.schemas import CartSummary, MutationResult, UpdateAmountRequest
from shared.events import (
    BaseEvent,
    CartItemAddedEvent,
    CartItemQuantityUpdatedEvent,
    CartItemRemovedEvent,
)
from shared.kafka_client import BaseKafkaProducer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])

# Injected by main.py at startup
cart_store: CartStore = None
producer: Optional[BaseKafkaProducer] = None
owner_id: str = "default"

# Most specific first
ERROR_STATUS = [
    (LineNotFoundError, status.HTTP_404_NOT_FOUND),
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND),
    (StockExceededError, status.HTTP_409_CONFLICT),
    (InvalidAmountError, 422),
    (DependencyError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def get_cart_store() -> CartStore:
    if cart_store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Cart store not initialized")
    return cart_store


def get_producer() -> Optional[BaseKafkaProducer]:
    return producer


def publish_event(publisher: Optional[BaseKafkaProducer], event: BaseEvent) -> None:
    """Publish a cart event if Kafka is configured. The cart is already saved, so failures are only logged."""
    if publisher is None:
        return
    try:
        publisher.publish(event.event_type, event)
    except Exception as e:
        logger.error(f"Failed to publish {event.event_type}: {e}", extra={"event_type": event.event_type})


def raise_for_result(result: MutationResult) -> None:
    if result.ok:
        return
    for error_type, status_code in ERROR_STATUS:
        if isinstance(result.error, error_type):
            raise HTTPException(status_code=status_code, detail=result.message)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)


@router.get("", response_model=CartSummary)
async def get_cart(store: CartStore = Depends(get_cart_store)) -> CartSummary:
    """Get the cart with totals."""
    return store.summary()


@router.post("/items/{product_id}", response_model=CartSummary)
async def add_product(
    product_id: int,
    store: CartStore = Depends(get_cart_store),
    publisher: Optional[BaseKafkaProducer] = Depends(get_producer),
) -> CartSummary:
    """Add one unit of a product to the cart."""
    result = await store.add_product(product_id)
    raise_for_result(result)

    line = next(line for line in result.cart if line.product_id == product_id)
    publish_event(
        publisher,
        CartItemAddedEvent(owner_id=owner_id, product_id=product_id, amount=line.amount, price=line.price),
    )
    return CartSummary.from_lines(result.cart)


@router.put("/items/{product_id}", response_model=CartSummary)
async def update_product_amount(
    product_id: int,
    request: UpdateAmountRequest,
    store: CartStore = Depends(get_cart_store),
    publisher: Optional[BaseKafkaProducer] = Depends(get_producer),
) -> CartSummary:
    """Set the quantity of a product already in the cart."""
    result = await store.update_product_amount(product_id, request.amount)
    raise_for_result(result)

    publish_event(
        publisher,
        CartItemQuantityUpdatedEvent(owner_id=owner_id, product_id=product_id, amount=request.amount),
    )
    return CartSummary.from_lines(result.cart)


@router.delete("/items/{product_id}", response_model=CartSummary)
async def remove_product(
    product_id: int,
    store: CartStore = Depends(get_cart_store),
    publisher: Optional[BaseKafkaProducer] = Depends(get_producer),
) -> CartSummary:
    """Remove a product's line from the cart."""
    result = store.remove_product(product_id)
    raise_for_result(result)

    publish_event(publisher, CartItemRemovedEvent(owner_id=owner_id, product_id=product_id))
    return CartSummary.from_lines(result.cart)
