"""Maszyna stanow zamowienia.

    PENDING -> CONFIRMED -> PREPARING -> OUT_FOR_DELIVERY -> DELIVERED
    PENDING, CONFIRMED -> CANCELLED
    kazdy nieterminalny -> REFUNDED (po zwrocie platnosci u operatora)

DELIVERED, CANCELLED i REFUNDED sa terminalne.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, FrozenSet

from order_engine.data.models.order import OrderModel
from order_engine.domain.enums import Actor, OrderStatus, TERMINAL_STATUSES
from order_engine.domain.errors import InvalidTransitionError, ValidationError
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

_FORWARD = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
}

VALID_TRANSITIONS: Mapping[OrderStatus, FrozenSet[OrderStatus]] = {
    status: frozenset(
        set()
        if status in TERMINAL_STATUSES
        else _FORWARD.get(status, set()) | {OrderStatus.REFUNDED}
    )
    for status in OrderStatus
}


def _default_actors() -> dict:
    actors = {status: frozenset({Actor.ADMIN}) for status in OrderStatus}
    actors[OrderStatus.CONFIRMED] = frozenset({Actor.ADMIN, Actor.SYSTEM})
    actors[OrderStatus.CANCELLED] = frozenset({Actor.ADMIN, Actor.CUSTOMER})
    return actors


@dataclass(frozen=True)
class TransitionPolicy:
    """Kto moze wprowadzic zamowienie w dany status. Polityka, nie ograniczenie grafu."""

    allowed_actors: Mapping[OrderStatus, FrozenSet[Actor]] = field(default_factory=_default_actors)

    def permits(self, target: OrderStatus, actor: Actor) -> bool:
        return actor in self.allowed_actors.get(target, frozenset())


class OrderStateMachine:
    def __init__(
        self,
        policy: TransitionPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.policy = policy or TransitionPolicy()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
        return target in VALID_TRANSITIONS[current]

    def transition(
        self,
        order: OrderModel,
        target: OrderStatus | str,
        actor: Actor = Actor.ADMIN,
    ) -> OrderModel:
        """
        Zmienia status w miejscu i ustawia pola powiazane z przejsciem.
        Zapis robi wolajacy.
        """
        current = OrderStatus(order.status)
        try:
            target = OrderStatus(target)
        except ValueError:
            raise ValidationError("status", f"Nieznany status {target}")

        if not self.can_transition(current, target):
            raise InvalidTransitionError(current.value, target.value)

        if not self.policy.permits(target, actor):
            raise InvalidTransitionError(
                current.value, target.value, f"niedozwolone dla {actor.value}"
            )

        now = self.clock()
        if target is OrderStatus.CANCELLED:
            if not (order.cancellation_reason or "").strip():
                raise ValidationError("cancellation_reason", "Powod anulowania jest wymagany")
            order.cancelled_at = now
        elif target is OrderStatus.DELIVERED:
            order.delivered_at = now

        order.status = target.value
        order.updated_at = now

        logger.info(f"Order {order.id} status {current.value} -> {target.value} by {actor.value}")
        return order
