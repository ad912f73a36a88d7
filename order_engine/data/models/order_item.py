import uuid

from sqlalchemy import JSON, CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from order_engine.data.database import Base


class OrderItemModel(Base):
    """Snapshot pozycji koszyka z chwili zlozenia zamowienia. Tylko insert."""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # referencja, nie wlasnosc - pozniejsze zmiany produktu nie ruszaja snapshotu
    product_id = Column(String(36), nullable=False)
    product_name = Column(String(255), nullable=False)
    product_image = Column(String(1024), nullable=True)

    # wariant tez jako snapshot, bez FK do katalogu
    variant_id = Column(String(36), nullable=True)
    variant_sku = Column(String(100), nullable=True)
    variant_name = Column(String(255), nullable=True)
    variant_attributes = Column(JSON, nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )
