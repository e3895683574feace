"""
Shared test setup.

Settings are read at import time, so test configuration must be in the
environment before any app module is imported.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest  # noqa: E402
from unittest.mock import Mock  # noqa: E402

from app.export.records import LineItem, Order, Product  # noqa: E402


@pytest.fixture
def widget():
    """Product P1 from the worked example."""
    return Product(id=1, sku="ABC-1", name="Widget", regular_price="19.99")


@pytest.fixture
def order_1042():
    """Completed order #1042 owned by U7 with 3 widgets."""
    return Order(
        id=1042,
        owner_id="U7",
        status="completed",
        order_number="1042",
        line_items=(LineItem(product_ref=1, quantity=3),),
    )


@pytest.fixture
def product_store(widget):
    """Mock product store knowing only the widget and its attributes."""
    attributes = {
        (1, "wcwp_wholesale"): "9.99",
        (1, "_global_unique_id"): "0123456789",
    }

    store = Mock()
    store.get_product = Mock(side_effect=lambda ref: widget if ref == 1 else None)
    store.get_product_attribute = Mock(
        side_effect=lambda product_id, key: attributes.get((product_id, key))
    )
    return store
