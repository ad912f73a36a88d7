# order_engine/repos/order_repo.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from order_engine.data.models.order import OrderModel


class OrderRepo:
    """Zapis i odczyt zamowien. Commit robi wolajacy (transaction())."""

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order_for_update(self, order_id: str) -> OrderModel | None:
        # SELECT ... FOR UPDATE, rownolegle zmiany statusu ida po kolei
        return self.db.execute(
            select(OrderModel).where(OrderModel.id == order_id).with_for_update()
        ).scalar_one_or_none()

    def get_user_order(self, user_id: str, order_id: str, for_update: bool = False) -> OrderModel | None:
        stmt = select(OrderModel).where(
            OrderModel.id == order_id,
            OrderModel.user_id == user_id,
        )
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def list_user_orders(
        self,
        user_id: str,
        offset: int,
        limit: int,
        status: str | None = None,
    ) -> list[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        stmt = (
            stmt.order_by(OrderModel.created_at.desc(), OrderModel.id)
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_user_orders(self, user_id: str, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        return self.db.execute(stmt).scalar_one()

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order
