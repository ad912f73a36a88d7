# order_engine/services/address_client.py
import requests

from order_engine.domain.schemas import Address
from order_engine.utils.retry import http_retry
from order_engine.utils.settings import ADDRESS_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class AddressClient:
    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or ADDRESS_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def find_for_user(self, user_id: str, address_id: str) -> Address | None:
        url = f"{self.base_url}/users/{user_id}/addresses/{address_id}"
        logger.info(f"AddressClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()

        address = Address.model_validate(resp.json())
        # adres innego uzytkownika traktujemy jak brak adresu
        if address.user_id != user_id:
            return None
        return address
