from sqlalchemy import Column, Integer, String

from order_engine.data.database import Base


class OrderSequenceModel(Base):
    """Licznik numerow zamowien per dzien UTC (klucz YYYYMMDD)."""

    __tablename__ = "order_sequences"

    day = Column(String(8), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
