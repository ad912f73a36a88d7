#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from order_engine.data.models.product import ProductModel
from order_engine.data.models.order import OrderModel
from order_engine.data.models.order_item import OrderItemModel
from order_engine.data.models.order_sequence import OrderSequenceModel

__all__ = ["ProductModel", "OrderModel", "OrderItemModel", "OrderSequenceModel"]
