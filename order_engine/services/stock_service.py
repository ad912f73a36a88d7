# order_engine/services/stock_service.py
from collections import OrderedDict
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from order_engine.domain.errors import InsufficientStockError, ValidationError
from order_engine.repos.stock_repo import StockRepo
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class StockReservationManager:
    """
    Rezerwacja stanu magazynowego dla calego zamowienia, wszystko albo nic.

    Kazdy produkt schodzi warunkowym UPDATE (stock >= qty). Gdy ktorys sie nie
    uda, rzucamy InsufficientStockError, a cofniecie wczesniejszych
    dekrementacji robi rollback transakcji wolajacego. Bez kompensacji w kodzie.
    """

    def __init__(self, db: Session):
        self.repo = StockRepo(db)

    def reserve(self, items: Iterable[Tuple[str, int]]) -> dict[str, int]:
        requested = merge_quantities(items)

        for product_id, quantity in requested.items():
            rowcount = self.repo.decrement_if_available(product_id, quantity)
            if rowcount == 0:
                available = self.repo.get_stock(product_id)
                logger.warning(
                    f"Stock reservation refused for product {product_id}: "
                    f"requested {quantity}, available {available}"
                )
                raise InsufficientStockError(product_id, quantity, available)

        logger.info(f"Reserved stock for {len(requested)} products")
        return dict(requested)


def merge_quantities(items: Iterable[Tuple[str, int]]) -> "OrderedDict[str, int]":
    """Skleja linie tego samego produktu, porzadek po id - stala kolejnosc blokad wierszy."""
    merged: dict[str, int] = {}
    for product_id, quantity in items:
        if quantity <= 0:
            raise ValidationError("quantity", "Ilosc musi byc wieksza niz 0")
        merged[product_id] = merged.get(product_id, 0) + quantity
    return OrderedDict(sorted(merged.items()))
