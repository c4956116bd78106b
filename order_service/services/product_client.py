# order_service/services/product_client.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import requests
from requests import RequestException

from order_service.domain.errors import (
    CatalogUnavailable,
    InsufficientStock,
    ProductNotFound,
)
from order_service.utils.retry import http_retry
from order_service.utils.settings import PRODUCT_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProductSnapshot:
    id: str
    name: str
    price: Decimal
    stock: int
    image: Optional[str] = None

    @classmethod
    def from_json(cls, product_id: str, data: dict) -> "ProductSnapshot":
        return cls(
            id=str(product_id),
            name=data["name"],
            price=Decimal(str(data["price"])),
            stock=int(data.get("stock", 0)),
            image=data.get("image"),
        )


class ProductClient:
    """
    Klient HTTP do product-service (katalog).

    - get_product: odczyt, retry na bledach transportu
    - adjust_stock: mutacja, bez retry (nie jest idempotentna)
    """

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _get(self, url: str) -> requests.Response:
        return requests.get(url, timeout=self.timeout)

    def get_product(self, product_id: str) -> ProductSnapshot:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        try:
            resp = self._get(url)
        except RequestException as e:
            logger.error(f"Catalog unreachable for product {product_id}: {e}")
            raise CatalogUnavailable(f"Catalog unavailable: {e}") from e

        if resp.status_code == 404:
            raise ProductNotFound(product_id)

        if resp.status_code >= 400:
            logger.error(f"Catalog returned {resp.status_code} for product {product_id}")
            raise CatalogUnavailable(f"Catalog returned {resp.status_code}")

        try:
            return ProductSnapshot.from_json(product_id, resp.json())
        except (ValueError, KeyError, TypeError) as e:
            raise CatalogUnavailable(f"Malformed catalog response: {e}") from e

    def adjust_stock(self, product_id: str, quantity: int, direction: str) -> int:
        if direction not in ("increase", "decrease"):
            raise ValueError(f"Unknown stock direction: {direction}")

        url = f"{self.base_url}/products/{product_id}/stock"
        logger.info(f"ProductClient PATCH {url} {direction} {quantity}")

        try:
            resp = requests.patch(
                url,
                json={"quantity": quantity, "operation": direction},
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"Catalog unreachable while adjusting stock of {product_id}: {e}")
            raise CatalogUnavailable(f"Catalog unavailable: {e}") from e

        if resp.status_code == 404:
            raise ProductNotFound(product_id)

        # catalog robi check-and-decrement atomowo, jego 400 jest wiazace
        if resp.status_code == 400 and direction == "decrease":
            raise InsufficientStock(product_id, product_id=product_id)

        if resp.status_code >= 400:
            logger.error(f"Catalog returned {resp.status_code} on stock update of {product_id}")
            raise CatalogUnavailable(f"Catalog returned {resp.status_code}")

        try:
            return int(resp.json()["newStock"])
        except (ValueError, KeyError, TypeError) as e:
            raise CatalogUnavailable(f"Malformed catalog response: {e}") from e
