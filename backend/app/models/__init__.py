from app.models.user import User
from app.models.order import Order, OrderItem
from app.models.product import Product, ProductMeta

__all__ = [
    "User",
    "Order",
    "OrderItem",
    "Product",
    "ProductMeta",
]
