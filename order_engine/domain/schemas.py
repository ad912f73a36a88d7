# order_engine/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, List
from decimal import Decimal
from datetime import datetime

from order_engine.domain.enums import OrderStatus, PaymentMethod, PaymentStatus


# =====================================================
# Kontrakty zewnetrznych kolaboratorow
# =====================================================
class CartLine(BaseModel):
    """Pozycja snapshotu koszyka."""

    product_id: str
    product_name: str
    product_image: str | None = None
    variant_id: str | None = None
    variant_sku: str | None = None
    variant_name: str | None = None
    variant_attributes: Dict[str, str] | None = None
    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., gt=0)


class CartSnapshot(BaseModel):
    """Snapshot aktywnego koszyka uzytkownika w chwili checkoutu."""

    items: List[CartLine] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")


class Address(BaseModel):
    id: str
    user_id: str
    full_name: str | None = None
    phone_number: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    is_default: bool = False


class CouponResult(BaseModel):
    """Wynik zewnetrznej walidacji kuponu."""

    discount_amount: Decimal = Field(..., ge=0)
    is_free_shipping: bool = False
    coupon_id: str | None = None


class PriceBreakdown(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    delivery_charge: Decimal
    discount_amount: Decimal
    coupon_discount: Decimal
    total_amount: Decimal


# =====================================================
# Wejscie API
# =====================================================
class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia z koszyka."""

    address_id: str = Field(..., min_length=1, description="ID adresu dostawy")
    payment_method: PaymentMethod
    special_instructions: str | None = Field(None, max_length=1000)
    coupon_code: str | None = Field(None, min_length=1, max_length=100)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    cancellation_reason: str | None = None


class OrderCancel(BaseModel):
    cancellation_reason: str = Field(..., min_length=1, max_length=500)


# =====================================================
# Wyjscie API
# =====================================================
class OrderItemOut(BaseModel):
    id: str
    product_id: str
    product_name: str
    product_image: str | None = None
    variant_id: str | None = None
    variant_sku: str | None = None
    variant_name: str | None = None
    variant_attributes: Dict[str, str] | None = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: str
    order_number: str
    user_id: str
    address_id: str
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    subtotal: Decimal
    tax_amount: Decimal
    delivery_charge: Decimal
    discount_amount: Decimal
    coupon_discount: Decimal
    total_amount: Decimal
    coupon_code: str | None = None
    special_instructions: str | None = None
    estimated_delivery_date: datetime
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]
    address: Address | None = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    current_page: int
    page_size: int
    total_items: int
    total_pages: int


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination
