"""
cart_service/main.py - Cart State Service

PURPOSE:
    Keeps one shopping cart in memory, validates every change against the
    inventory service and persists the cart under a fixed storage key so it
    survives restarts.

API ENDPOINTS:
    GET    /health                     - Health check endpoint
    GET    /cart                       - Cart contents with totals
    POST   /cart/items/{product_id}    - Add one unit of a product
    PUT    /cart/items/{product_id}    - Set a product's quantity ({"amount": n})
    DELETE /cart/items/{product_id}    - Remove a product from the cart

KAFKA EVENTS PUBLISHED (when KAFKA_ENABLED=true):
    - cart.item_added
    - cart.item_removed
    - cart.item_quantity_updated
    - notification.send: user-facing failure messages

TESTING COMMANDS:
    1. Add a product:
        curl -X POST http://localhost:8001/cart/items/1

    2. Set its quantity to 3:
        curl -X PUT http://localhost:8001/cart/items/1 \
          -H "Content-Type: application/json" \
          -d '{"amount": 3}'

    3. Remove it:
        curl -X DELETE http://localhost:8001/cart/items/1

    4. View the cart:
        curl -X GET http://localhost:8001/cart

DEPENDENCIES:
    - Inventory HTTP API: stock counts and product metadata
    - Redis: cart persistence (or STORAGE_BACKEND=memory)
    - Kafka: optional event streaming
"""

import logging
from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI

from cart_service import routes
from cart_service.cart_repository import CartRepository, InMemoryKeyValueStore, RedisKeyValueStore
from cart_service.cart_store import CartStore
from cart_service.config import get_settings
from cart_service.errors import PersistenceError
from cart_service.inventory_client import InventoryClient
from cart_service.notifier import KafkaNotifier, LoggingNotifier
from cart_service.schemas import HealthResponse
from shared.kafka_client import BaseKafkaProducer
from shared.logging_config import setup_logging
from shared.topic_initializer import create_topics

settings = get_settings()

setup_logging(settings.service_name, level=settings.log_level, tz=settings.log_timezone)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire storage, inventory client, notifier and producer; tear them down on exit."""
    logger.info("Starting Cart Service...")

    redis_client = None
    producer = None

    if settings.storage_backend == "redis":
        try:
            redis_client = redis.Redis(host=settings.redis_host, port=settings.redis_port, db=settings.redis_db)
            redis_client.ping()
            logger.info("Redis connected")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise
        store = RedisKeyValueStore(redis_client, ttl=settings.cart_ttl)
    else:
        logger.warning("Using in-memory cart storage; the cart will not survive restarts")
        store = InMemoryKeyValueStore()

    if settings.kafka_enabled:
        try:
            create_topics(settings.kafka_bootstrap_servers)
            producer = BaseKafkaProducer(settings.kafka_bootstrap_servers, client_id="cart-producer")
            logger.info("Kafka producer initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Kafka: {e}")
            raise
        notifier = KafkaNotifier(producer, settings.cart_owner_id)
    else:
        notifier = LoggingNotifier()

    inventory = InventoryClient(settings.inventory_url, timeout=settings.inventory_timeout)

    try:
        routes.cart_store = CartStore(
            CartRepository(store, settings.cart_storage_key),
            stock_service=inventory,
            product_catalog=inventory,
            notifier=notifier,
            locale=settings.messages_locale,
        )
    except PersistenceError as e:
        logger.error(f"Failed to load cart: {e}")
        await inventory.aclose()
        raise
    routes.producer = producer
    routes.owner_id = settings.cart_owner_id

    yield

    logger.info("Shutting down Cart Service...")
    routes.cart_store = None
    routes.producer = None
    await inventory.aclose()
    if redis_client:
        redis_client.close()
    if producer:
        producer.close()


app = FastAPI(title="Cart Service", version="1.0.0", lifespan=lifespan)
app.include_router(routes.router)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", service=settings.service_name, version="1.0.0")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.cart_service_port)
