import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from the environment (and `.env` if present).

    Storage:
      - STORAGE_BACKEND: "redis" (default) or "memory" for local development
      - CART_STORAGE_KEY: the single key the cart blob lives under
      - CART_TTL: optional expiry in seconds; carts never expire when unset

    Inventory:
      - INVENTORY_URL: base URL serving /stock/{id} and /products/{id}
      - INVENTORY_TIMEOUT: per-request timeout in seconds
    """

    service_name: str = "cart-service"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_timezone: str = "UTC"

    inventory_url: str = os.getenv("INVENTORY_URL", "http://localhost:3333")
    inventory_timeout: float = 5.0

    storage_backend: Literal["redis", "memory"] = "redis"
    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_db: int = 0
    cart_storage_key: str = "@RocketShoes:cart"
    cart_ttl: Optional[int] = None

    kafka_enabled: bool = False
    kafka_bootstrap_servers: str = os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092")

    cart_owner_id: str = "default"
    messages_locale: str = "en"
    cart_service_port: int = int(os.getenv("CART_SERVICE_PORT", "8001"))

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader."""
    return Settings()
