# order_engine/services/order_service.py
import math
from datetime import datetime, timedelta, timezone
from typing import Callable

from sqlalchemy.orm import Session

from order_engine.data.database import transaction
from order_engine.data.models.order import OrderModel
from order_engine.data.models.order_item import OrderItemModel
from order_engine.domain.enums import Actor, OrderStatus, PaymentMethod, PaymentStatus
from order_engine.domain.errors import (
    AddressNotFoundError,
    EmptyCartError,
    InvalidCouponError,
    OrderNotFoundError,
    ValidationError,
)
from order_engine.domain.schemas import CartLine, PriceBreakdown
from order_engine.repos.order_repo import OrderRepo
from order_engine.services.cancellation import CancellationPolicy
from order_engine.services.order_number import (
    DailySequence,
    DatabaseDailySequence,
    OrderNumberGenerator,
    RedisDailySequence,
)
from order_engine.services.ports import (
    AddressProvider,
    CartProvider,
    CouponValidator,
    NotificationDispatcher,
)
from order_engine.services.pricing import PricingCalculator, line_total, to_money
from order_engine.services.state_machine import OrderStateMachine
from order_engine.services.stock_service import StockReservationManager
from order_engine.utils.settings import DELIVERY_LEAD_DAYS, ORDER_SEQUENCE_BACKEND
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def build_sequence(db: Session) -> DailySequence:
    if ORDER_SEQUENCE_BACKEND == "redis":
        return RedisDailySequence()
    return DatabaseDailySequence(db.get_bind())


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Kolaboratorzy zewnetrzni (koszyk, adresy, kupony, powiadomienia)
    przychodza z zewnatrz, brak globalnych klientow.
    """

    def __init__(
        self,
        db: Session,
        cart_provider: CartProvider,
        address_provider: AddressProvider,
        notifier: NotificationDispatcher,
        coupon_validator: CouponValidator | None = None,
        pricing: PricingCalculator | None = None,
        sequence: DailySequence | None = None,
        state_machine: OrderStateMachine | None = None,
        cancellation: CancellationPolicy | None = None,
        delivery_lead_days: int = DELIVERY_LEAD_DAYS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_provider = cart_provider
        self.address_provider = address_provider
        self.notifier = notifier
        self.coupon_validator = coupon_validator
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.pricing = pricing or PricingCalculator()
        self.stock = StockReservationManager(db)
        self.numbers = OrderNumberGenerator(sequence or build_sequence(db), clock=self.clock)
        self.state_machine = state_machine or OrderStateMachine(clock=self.clock)
        self.cancellation = cancellation or CancellationPolicy(self.state_machine)
        self.delivery_lead = timedelta(days=delivery_lead_days)

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_order(
        self,
        user_id: str,
        address_id: str,
        payment_method: PaymentMethod | str,
        special_instructions: str | None = None,
        coupon_code: str | None = None,
    ) -> OrderModel:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Snapshot koszyka i weryfikacja adresu (zewnetrzne)
        2. Wycena (+ kupon)
        3. Numer zamowienia z licznika dnia (osobna krotka transakcja)
        4. Jedna transakcja: rezerwacja stanu, insert Order + OrderItem
        5. Po commicie, best-effort: czyszczenie koszyka, uzycie kuponu, powiadomienie
        """
        _require(user_id, "user_id")
        _require(address_id, "address_id")
        method = _parse_payment_method(payment_method)
        if special_instructions is not None and not isinstance(special_instructions, str):
            raise ValidationError("special_instructions", "Musi byc tekstem")

        cart = self.cart_provider.get_cart(user_id)
        if cart is None or not cart.items:
            raise EmptyCartError(user_id)
        lines = list(cart.items)

        address = self.address_provider.find_for_user(user_id, address_id)
        if address is None:
            raise AddressNotFoundError(address_id)

        coupon = None
        if coupon_code:
            if self.coupon_validator is None:
                raise InvalidCouponError(coupon_code, "kupony nie sa obslugiwane")
            coupon = self.coupon_validator.apply(
                coupon_code, user_id, self.pricing.subtotal(lines), lines
            )

        prices = self.pricing.calculate(lines, coupon)
        _check_totals(prices, lines)

        # numer z osobnej, od razu zatwierdzonej transakcji - brak blokady licznika
        # do commita zamowienia, za cene dziur w numeracji
        order_number = self.numbers.generate()

        with transaction(self.db):
            self.stock.reserve((line.product_id, line.quantity) for line in lines)

            now = self.clock()
            order = OrderModel(
                order_number=order_number,
                user_id=user_id,
                address_id=address_id,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                payment_method=method.value,
                subtotal=prices.subtotal,
                tax_amount=prices.tax_amount,
                delivery_charge=prices.delivery_charge,
                discount_amount=prices.discount_amount,
                coupon_discount=prices.coupon_discount,
                total_amount=prices.total_amount,
                coupon_code=coupon_code if coupon else None,
                coupon_id=coupon.coupon_id if coupon else None,
                special_instructions=special_instructions,
                estimated_delivery_date=now + self.delivery_lead,
                created_at=now,
                updated_at=now,
                items=[
                    OrderItemModel(
                        position=position,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        product_image=line.product_image,
                        variant_id=line.variant_id,
                        variant_sku=line.variant_sku,
                        variant_name=line.variant_name,
                        variant_attributes=line.variant_attributes,
                        quantity=line.quantity,
                        unit_price=to_money(line.unit_price),
                        total_price=line_total(line),
                    )
                    for position, line in enumerate(lines)
                ],
            )
            self.repo.add_order(order)

        logger.info(
            f"Order {order.order_number} ({order.id}) created for user {user_id}, "
            f"total {order.total_amount}"
        )

        try:
            self.cart_provider.clear(user_id)
        except Exception as e:
            logger.warning(f"Failed to clear cart for user {user_id} after order {order.id}: {e}")

        if coupon is not None and coupon.coupon_id:
            try:
                self.coupon_validator.record_usage(
                    coupon.coupon_id, user_id, order.id, order.coupon_discount
                )
            except Exception as e:
                logger.error(f"Failed to record coupon usage {coupon.coupon_id} for order {order.id}: {e}")

        self._notify(order)

        order.address = address
        return order

    def update_order_status(
        self,
        order_id: str,
        new_status: OrderStatus | str,
        cancellation_reason: str | None = None,
        actor: Actor = Actor.ADMIN,
    ) -> OrderModel:
        """Use Case: administracyjna zmiana statusu."""
        target = _parse_status(new_status)
        if target is OrderStatus.CANCELLED and cancellation_reason is not None:
            self.cancellation.validate_reason(cancellation_reason)

        with transaction(self.db):
            order = self.repo.get_order_for_update(order_id)
            if not order:
                raise OrderNotFoundError(order_id)

            if target is OrderStatus.CANCELLED and cancellation_reason is not None:
                order.cancellation_reason = cancellation_reason

            self.state_machine.transition(order, target, actor=actor)
            self.repo.save(order)

        self._notify(order)
        return order

    def cancel_order(self, user_id: str, order_id: str, reason: str) -> OrderModel:
        """Use Case: anulowanie przez klienta."""
        self.cancellation.validate_reason(reason)

        with transaction(self.db):
            order = self.repo.get_user_order(user_id, order_id, for_update=True)
            if not order:
                raise OrderNotFoundError(order_id)

            self.cancellation.cancel(order, reason)
            self.repo.save(order)

        logger.info(f"Order {order.id} cancelled by user {user_id}")
        self._notify(order)
        return order

    # =====================================================
    # QUERY
    # =====================================================
    def get_orders(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        status: OrderStatus | str | None = None,
    ) -> dict:
        """
        Use Case: Lista zamówień użytkownika, najnowsze pierwsze.
        """
        if not isinstance(page, int) or page < 1:
            raise ValidationError("page", "Strona musi byc dodatnia liczba calkowita")
        if not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError("page_size", f"Rozmiar strony musi byc w zakresie 1..{MAX_PAGE_SIZE}")
        status_value = _parse_status(status).value if status else None

        total_items = self.repo.count_user_orders(user_id, status_value)
        orders = self.repo.list_user_orders(
            user_id,
            offset=(page - 1) * page_size,
            limit=page_size,
            status=status_value,
        )

        return {
            "orders": orders,
            "pagination": {
                "current_page": page,
                "page_size": page_size,
                "total_items": total_items,
                "total_pages": math.ceil(total_items / page_size),
            },
        }

    def get_order_by_id(self, user_id: str, order_id: str) -> OrderModel:
        """
        Use Case: Pobranie zamówienia. Cudze i nieistniejace wygladaja tak samo.
        """
        order = self.repo.get_user_order(user_id, order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    # =====================================================
    # helpers
    # =====================================================
    def _notify(self, order: OrderModel) -> None:
        # po commicie, blad powiadomienia nigdy nie cofa zmiany statusu
        try:
            self.notifier.notify_status_change(order.user_id, order.id, order.status)
        except Exception as e:
            logger.error(f"Failed to send status notification for order {order.id}: {e}")


def _require(value, field: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "Pole jest wymagane")


def _parse_payment_method(value) -> PaymentMethod:
    try:
        return PaymentMethod(value)
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError("payment_method", f"Dozwolone: {allowed}")


def _parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError("status", f"Dozwolone: {allowed}")


def _check_totals(prices: PriceBreakdown, lines: list[CartLine]) -> None:
    expected = (
        prices.subtotal
        + prices.tax_amount
        + prices.delivery_charge
        - prices.discount_amount
        - prices.coupon_discount
    )
    if prices.total_amount != expected:
        raise ValidationError("total_amount", f"{prices.total_amount} != {expected}")
    if sum((line_total(line) for line in lines), 0) != prices.subtotal:
        raise ValidationError("subtotal", "Suma pozycji rozni sie od subtotalu")
