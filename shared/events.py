"""
events.py - Cart Event Schema Definitions

PURPOSE:
    Defines the event schemas the cart service publishes to Kafka.
    Uses Pydantic for data validation and serialization.

EVENT CATEGORIES:
    1. Cart Events: Shopping cart mutations
       - cart.item_added
       - cart.item_removed
       - cart.item_quantity_updated

    2. Notification Events: User-facing failure reports
       - notification.send

COMMON FIELDS (BaseEvent):
    - event_id: Unique identifier (UUID)
    - event_type: Event category and action
    - timestamp: Timezone-aware timestamp of event creation
    - correlation_id: Links the events produced by one cart operation

USAGE:
    Creating an event:
        event = CartItemAddedEvent(
            correlation_id="op-123",
            owner_id="default",
            product_id=42,
            amount=1,
            price=100.0,
        )

    Serializing to JSON:
        json_data = event.model_dump_json()

    Deserializing from raw JSON string:
        event = EVENT_TYPE_MAP[event_type].model_validate_json(json_string)
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field


class BaseEvent(BaseModel):
    """
    Base event model for all Kafka events.

    All events inherit from this class and include:
    - Unique event ID
    - Event type identifier
    - UTC timezone-aware timestamp
    - Correlation ID for tracing one operation across services
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    correlation_id: str = Field(default_factory=lambda: str(uuid4()))


# ============================================================================
# CART EVENTS - Shopping cart mutations
# ============================================================================

class CartItemAddedEvent(BaseEvent):
    """
    Published when a unit of a product is added to the cart.
    `amount` is the resulting line amount, not the increment.
    """

    event_type: str = "cart.item_added"
    owner_id: str
    product_id: int
    amount: int
    price: float


class CartItemRemovedEvent(BaseEvent):
    """Published when a line is removed from the cart."""

    event_type: str = "cart.item_removed"
    owner_id: str
    product_id: int


class CartItemQuantityUpdatedEvent(BaseEvent):
    """Published when the amount of an existing line is set."""

    event_type: str = "cart.item_quantity_updated"
    owner_id: str
    product_id: int
    amount: int


# ============================================================================
# NOTIFICATION EVENTS - User-facing messages
# ============================================================================

class NotificationSendEvent(BaseEvent):
    """
    Published when a failure message must reach the user.
    Consumers: whatever channel renders messages to the cart owner.
    """

    event_type: str = "notification.send"
    owner_id: str
    notification_type: str  # e.g. "cart_error"
    message: str


# Event mapping for deserialization
EVENT_TYPE_MAP = {
    "cart.item_added": CartItemAddedEvent,
    "cart.item_removed": CartItemRemovedEvent,
    "cart.item_quantity_updated": CartItemQuantityUpdatedEvent,
    "notification.send": NotificationSendEvent,
}

ALL_TOPICS = list(EVENT_TYPE_MAP)
