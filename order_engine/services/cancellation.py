# order_engine/services/cancellation.py
from order_engine.data.models.order import OrderModel
from order_engine.domain.enums import Actor, OrderStatus
from order_engine.domain.errors import OrderNotCancellableError, ValidationError
from order_engine.services.state_machine import OrderStateMachine
from order_engine.utils.settings import CANCELLATION_REASON_MIN_LENGTH

CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


class CancellationPolicy:
    """Anulowanie tylko z PENDING albo CONFIRMED, z niepustym powodem."""

    def __init__(
        self,
        state_machine: OrderStateMachine,
        min_reason_length: int = CANCELLATION_REASON_MIN_LENGTH,
    ):
        self.state_machine = state_machine
        self.min_reason_length = min_reason_length

    @staticmethod
    def can_cancel(order: OrderModel) -> bool:
        return OrderStatus(order.status) in CANCELLABLE_STATUSES

    def validate_reason(self, reason: str | None) -> str:
        if reason is None or not reason.strip():
            raise ValidationError("cancellation_reason", "Powod anulowania jest wymagany")
        if len(reason.strip()) < self.min_reason_length:
            raise ValidationError(
                "cancellation_reason",
                f"Powod musi miec co najmniej {self.min_reason_length} znakow",
            )
        return reason

    def cancel(self, order: OrderModel, reason: str, actor: Actor = Actor.CUSTOMER) -> OrderModel:
        self.validate_reason(reason)

        if not self.can_cancel(order):
            raise OrderNotCancellableError(order.id, order.status)

        # powod zapisany dokladnie tak jak podal klient
        order.cancellation_reason = reason
        return self.state_machine.transition(order, OrderStatus.CANCELLED, actor=actor)
