"""
inventory_client.py - Inventory Service Client

Talks to the inventory HTTP API that backs both stock lookups and the
product catalog:

    GET {base_url}/stock/{product_id}     -> {"id": 42, "amount": 5}
    GET {base_url}/products/{product_id}  -> {"id": 42, "title": "Shoe",
                                              "price": 100.0, "image": "https://..."}

Any transport error or non-2xx answer becomes a DependencyError: 404 is
reported as ProductNotFoundError, everything else as InventoryUnavailableError.
No retries are attempted.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from cart_service.errors import InventoryUnavailableError, ProductNotFoundError
from cart_service.schemas import ProductInfo, StockInfo

logger = logging.getLogger(__name__)


class InventoryClient:
    """StockService and ProductCatalog over one shared httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def get_stock(self, product_id: int) -> StockInfo:
        data = await self._get_json(f"/stock/{product_id}", product_id)
        if isinstance(data, dict):
            # Stock answers may carry only {"amount": n}
            data = {"product_id": product_id, **data}
        try:
            stock = StockInfo.model_validate(data)
        except ValidationError as e:
            raise InventoryUnavailableError(f"Malformed stock response for product {product_id}", product_id) from e
        logger.debug(f"Stock for product {product_id}: {stock.amount}")
        return stock

    async def get_product(self, product_id: int) -> ProductInfo:
        data = await self._get_json(f"/products/{product_id}", product_id)
        try:
            return ProductInfo.model_validate(data)
        except ValidationError as e:
            raise InventoryUnavailableError(f"Malformed product response for product {product_id}", product_id) from e

    async def _get_json(self, path: str, product_id: int) -> Dict[str, Any]:
        try:
            response = await self.client.get(path)
        except httpx.HTTPError as e:
            logger.error(f"Inventory request {path} failed: {e}")
            raise InventoryUnavailableError(f"Inventory service unreachable: {e}", product_id) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise ProductNotFoundError(product_id)

        try:
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPStatusError, ValueError) as e:
            logger.error(f"Inventory request {path} returned an unusable response: {e}")
            raise InventoryUnavailableError(f"Inventory service error: {e}", product_id) from e

    async def aclose(self) -> None:
        await self.client.aclose()
