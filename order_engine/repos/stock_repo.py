# order_engine/repos/stock_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from order_engine.data.models.product import ProductModel


class StockRepo:
    def __init__(self, db: Session):
        self.db = db

    def decrement_if_available(self, product_id: str, quantity: int) -> int:
        # warunkowy update, np. update set stock = stock - 2 where id = 'a' and stock >= 2
        # rowcount 0 -> za malo towaru albo brak produktu
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def get_stock(self, product_id: str) -> int | None:
        return self.db.execute(
            select(ProductModel.stock_quantity).where(ProductModel.id == product_id)
        ).scalar_one_or_none()
