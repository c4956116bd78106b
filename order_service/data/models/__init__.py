#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from order_service.data.models.cart import CartModel
from order_service.data.models.cart_item import CartItemModel
from order_service.data.models.order import OrderModel
from order_service.data.models.order_item import OrderItemModel

__all__ = ["CartModel", "CartItemModel", "OrderModel", "OrderItemModel"]
