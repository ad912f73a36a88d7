# order_engine/services/cart_client.py
import requests

from order_engine.domain.schemas import CartSnapshot
from order_engine.utils.retry import http_retry
from order_engine.utils.settings import CART_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class CartClient:
    """CartProvider po HTTP do cart-service."""

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or CART_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def get_cart(self, user_id: str) -> CartSnapshot | None:
        url = f"{self.base_url}/carts/{user_id}"
        logger.info(f"CartClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return CartSnapshot.model_validate(resp.json())

    def clear(self, user_id: str) -> None:
        # bez retry - nieaktualny koszyk to kosmetyka
        url = f"{self.base_url}/carts/{user_id}/items"
        logger.info(f"CartClient DELETE {url}")

        resp = requests.delete(url, timeout=self.timeout)
        resp.raise_for_status()
