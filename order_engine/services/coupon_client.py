# order_engine/services/coupon_client.py
from decimal import Decimal
from typing import Sequence

import requests

from order_engine.domain.errors import InvalidCouponError
from order_engine.domain.schemas import CartLine, CouponResult
from order_engine.utils.retry import http_retry
from order_engine.utils.settings import COUPON_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class CouponClient:
    """CouponValidator po HTTP. Walidacja uprawnien kuponu zyje w coupon-service."""

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or COUPON_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def apply(
        self,
        code: str,
        user_id: str,
        subtotal: Decimal,
        items: Sequence[CartLine],
    ) -> CouponResult:
        url = f"{self.base_url}/coupons/apply"
        logger.info(f"CouponClient POST {url} code={code}")

        resp = requests.post(
            url,
            json={
                "code": code,
                "user_id": user_id,
                "subtotal": str(subtotal),
                "product_ids": [i.product_id for i in items],
            },
            timeout=self.timeout,
        )
        if 400 <= resp.status_code < 500:
            detail = None
            try:
                detail = resp.json().get("detail")
            except ValueError:
                pass
            raise InvalidCouponError(code, detail)
        resp.raise_for_status()

        data = resp.json()
        if not data.get("is_valid", True):
            raise InvalidCouponError(code, data.get("message"))
        return CouponResult.model_validate(data)

    def record_usage(
        self,
        coupon_id: str,
        user_id: str,
        order_id: str,
        discount_amount: Decimal,
    ) -> None:
        # bez retry - ponowienie mogloby policzyc uzycie dwa razy
        url = f"{self.base_url}/coupons/{coupon_id}/usages"
        logger.info(f"CouponClient POST {url} order={order_id}")

        resp = requests.post(
            url,
            json={
                "user_id": user_id,
                "order_id": order_id,
                "discount_amount": str(discount_amount),
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
