# order_engine/services/ports.py
"""Waskie interfejsy zewnetrznych kolaboratorow wstrzykiwane do OrderService."""

from decimal import Decimal
from typing import Protocol, Sequence

from order_engine.domain.schemas import Address, CartLine, CartSnapshot, CouponResult


class CartProvider(Protocol):
    def get_cart(self, user_id: str) -> CartSnapshot | None: ...

    def clear(self, user_id: str) -> None: ...


class AddressProvider(Protocol):
    def find_for_user(self, user_id: str, address_id: str) -> Address | None: ...


class CouponValidator(Protocol):
    def apply(
        self,
        code: str,
        user_id: str,
        subtotal: Decimal,
        items: Sequence[CartLine],
    ) -> CouponResult:
        """Rzuca InvalidCouponError gdy kupon nie przechodzi walidacji."""
        ...

    def record_usage(
        self,
        coupon_id: str,
        user_id: str,
        order_id: str,
        discount_amount: Decimal,
    ) -> None:
        """Best-effort po commicie zamowienia."""
        ...


class NotificationDispatcher(Protocol):
    def notify_status_change(self, user_id: str, order_id: str, new_status: str) -> None: ...
