from sqlalchemy import CheckConstraint, Column, Integer, String

from order_engine.data.database import Base


class ProductModel(Base):
    """Stan magazynowy produktu. Katalog nalezy do innego serwisu, tu tylko stock."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )
