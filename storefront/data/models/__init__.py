#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import (
    OrderModel,
    OrderItemModel,
    PaymentModel,
    OrderStatusHistoryModel,
)

__all__ = [
    "UserModel",
    "ProductModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
    "OrderStatusHistoryModel",
]
