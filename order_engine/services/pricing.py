# order_engine/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from order_engine.domain.errors import InvalidCartError
from order_engine.domain.schemas import CartLine, CouponResult, PriceBreakdown
from order_engine.utils.settings import (
    DELIVERY_CHARGE,
    FREE_DELIVERY_THRESHOLD,
    TAX_RATE,
)

CENT = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingCalculator:
    """
    Czysta funkcja: linie koszyka + opcjonalny kupon -> rozbicie kwot.
    Bez I/O. Kupon przychodzi juz zwalidowany (CouponValidator).
    """

    def __init__(
        self,
        tax_rate: Decimal = TAX_RATE,
        free_delivery_threshold: Decimal = FREE_DELIVERY_THRESHOLD,
        delivery_charge: Decimal = DELIVERY_CHARGE,
    ):
        self.tax_rate = Decimal(tax_rate)
        self.free_delivery_threshold = Decimal(free_delivery_threshold)
        self.delivery_charge = to_money(delivery_charge)

    def subtotal(self, lines: Iterable[CartLine]) -> Decimal:
        lines = list(lines)
        if not lines:
            raise InvalidCartError()
        return to_money(sum((line_total(line) for line in lines), Decimal("0.00")))

    def calculate(
        self,
        lines: Iterable[CartLine],
        coupon: CouponResult | None = None,
    ) -> PriceBreakdown:
        subtotal = self.subtotal(lines)
        tax_amount = to_money(subtotal * self.tax_rate)

        free_shipping = coupon is not None and coupon.is_free_shipping
        # prog wlacznie: subtotal == threshold -> dostawa gratis
        if free_shipping or subtotal >= self.free_delivery_threshold:
            delivery_charge = Decimal("0.00")
        else:
            delivery_charge = self.delivery_charge

        coupon_discount = Decimal("0.00")
        if coupon is not None:
            # rabat nie moze przekroczyc subtotalu
            coupon_discount = min(to_money(coupon.discount_amount), subtotal)

        # miejsce na rabaty produktowe, na razie zawsze 0
        discount_amount = Decimal("0.00")

        total_amount = subtotal + tax_amount + delivery_charge - discount_amount - coupon_discount

        return PriceBreakdown(
            subtotal=subtotal,
            tax_amount=tax_amount,
            delivery_charge=delivery_charge,
            discount_amount=discount_amount,
            coupon_discount=coupon_discount,
            total_amount=total_amount,
        )


def line_total(line: CartLine) -> Decimal:
    return to_money(to_money(line.unit_price) * line.quantity)
