# order_engine/api/routers/orders.py
from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from order_engine.data.database import get_db
from order_engine.domain.enums import OrderStatus
from order_engine.domain.schemas import (
    OrderCancel,
    OrderCreate,
    OrderListOut,
    OrderOut,
    OrderStatusUpdate,
)
from order_engine.services.address_client import AddressClient
from order_engine.services.cart_client import CartClient
from order_engine.services.coupon_client import CouponClient
from order_engine.services.notification_service import NotificationService
from order_engine.services.order_service import MAX_PAGE_SIZE, OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(
        db=db,
        cart_provider=CartClient(),
        address_provider=AddressClient(),
        notifier=NotificationService(),
        coupon_validator=CouponClient(),
    )


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: str = Header(..., alias="X-User-Id"),
    svc: OrderService = Depends(get_service),
):
    """
    Tworzy zamówienie z aktywnego koszyka uzytkownika.
    """
    return svc.create_order(
        user_id=user_id,
        address_id=payload.address_id,
        payment_method=payload.payment_method,
        special_instructions=payload.special_instructions,
        coupon_code=payload.coupon_code,
    )


@router.get("", response_model=OrderListOut)
def list_orders(
    user_id: str = Header(..., alias="X-User-Id"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    status: OrderStatus | None = Query(None),
    svc: OrderService = Depends(get_service),
):
    return svc.get_orders(user_id, page=page, page_size=page_size, status=status)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: str = Header(..., alias="X-User-Id"),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegóły zamówienia.
    """
    return svc.get_order_by_id(user_id, order_id)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    payload: OrderCancel,
    user_id: str = Header(..., alias="X-User-Id"),
    svc: OrderService = Depends(get_service),
):
    return svc.cancel_order(user_id, order_id, payload.cancellation_reason)


# autoryzacja admina jest poza tym serwisem
@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: str,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_service),
):
    return svc.update_order_status(
        order_id,
        payload.status,
        cancellation_reason=payload.cancellation_reason,
    )
