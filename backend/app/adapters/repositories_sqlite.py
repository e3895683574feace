"""
SQLite implementations of store interfaces.

Lean stack implementation using SQLAlchemy + SQLite.
Easy migration path to Postgres (same SQLAlchemy API).
"""
from typing import Optional
from sqlalchemy.orm import Session
from app.ports.stores import OrderStore, ProductStore
from app.export.records import LineItem, Order, Product
from app.models import Order as OrderModel, OrderItem, Product as ProductModel, ProductMeta


class SQLiteOrderStore(OrderStore):
    """SQLite implementation of OrderStore."""

    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order snapshot with line items in stored order."""
        order = self.db.query(OrderModel).filter(OrderModel.id == order_id).first()
        if not order:
            return None

        items = (
            self.db.query(OrderItem)
            .filter(OrderItem.order_id == order_id)
            .order_by(OrderItem.position, OrderItem.id)
            .all()
        )

        return Order(
            id=order.id,
            owner_id=order.customer_id,
            status=order.status,
            order_number=order.order_number,
            line_items=tuple(
                LineItem(product_ref=item.product_id, quantity=item.quantity)
                for item in items
            ),
        )


class SQLiteProductStore(ProductStore):
    """SQLite implementation of ProductStore."""

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_ref: int) -> Optional[Product]:
        """Get a product snapshot, or None if it was deleted."""
        product = self.db.query(ProductModel).filter(ProductModel.id == product_ref).first()
        if not product:
            return None

        return Product(
            id=product.id,
            sku=product.sku or "",
            name=product.name or "",
            regular_price=product.regular_price or "",
        )

    def get_product_attribute(self, product_id: int, key: str) -> Optional[str]:
        """Get a product meta value by key."""
        meta = (
            self.db.query(ProductMeta)
            .filter(ProductMeta.product_id == product_id, ProductMeta.meta_key == key)
            .first()
        )
        if not meta:
            return None
        return meta.meta_value
