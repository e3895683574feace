"""
Store interfaces for orders and products.

Both stores are read-only from the export core's point of view. Adapters
return snapshots (see app.export.records) so the core never touches ORM
objects or sessions directly.
"""
from abc import ABC, abstractmethod
from typing import Optional

from app.export.records import Order, Product


class OrderStore(ABC):
    """Repository for orders and their line items."""

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Order]:
        """
        Get an order snapshot.

        Args:
            order_id: ID of the order

        Returns:
            Order with line items in stored order, or None if not found
        """
        pass


class ProductStore(ABC):
    """Repository for products and their meta attributes."""

    @abstractmethod
    def get_product(self, product_ref: int) -> Optional[Product]:
        """
        Get a product snapshot.

        Args:
            product_ref: Product reference taken from a line item

        Returns:
            Product, or None if it was deleted or never existed
        """
        pass

    @abstractmethod
    def get_product_attribute(self, product_id: int, key: str) -> Optional[str]:
        """
        Get a single product attribute (meta value).

        Args:
            product_id: ID of the product
            key: Attribute key (e.g., "wcwp_wholesale")

        Returns:
            Attribute value, or None if absent
        """
        pass
