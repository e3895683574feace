"""
Tests for order CSV emitter.

Validates:
- Exact header and worked-example output
- One row per line item, stored order preserved
- Missing products / attributes render as empty fields
- Determinism (byte-identical repeated writes)
- Quoting, line endings, filename sanitizing
"""
import hashlib
import pytest
from unittest.mock import Mock

import polars as pl

from app.core.errors import ExportCancelled, GenerationFailure, OrderHasNoItems
from app.export.csv_emitter import OrderCSVEmitter, export_filename
from app.export.records import LineItem, Order, Product

HEADER = b"SKU,Product Name,RRP,Wholesale Price,Quantity,Barcode\n"


def test_generate_worked_example(product_store, order_1042):
    """Test the #1042 example end to end."""
    emitter = OrderCSVEmitter(product_store)
    result = emitter.generate(order_1042)

    assert result.filename == "order_1042.csv"
    assert result.mime_type == "text/csv"
    assert result.content == HEADER + b"ABC-1,Widget,19.99,9.99,3,0123456789\n"
    assert result.row_count == 1
    assert result.unresolved_items == []


def test_generate_deleted_product(product_store):
    """Test that a deleted product still yields a row with its quantity."""
    order = Order(
        id=1042,
        owner_id="U7",
        status="completed",
        order_number="1042",
        line_items=(LineItem(product_ref=99, quantity=3),),
    )

    result = OrderCSVEmitter(product_store).generate(order)

    assert result.content == HEADER + b",,,,3,\n"
    assert result.unresolved_items == [0]


def test_generate_item_without_product_ref(product_store):
    """Test line items that never had a product reference."""
    order = Order(id=5, owner_id=1, status="completed", line_items=(LineItem(None, 2),))

    result = OrderCSVEmitter(product_store).generate(order)

    assert result.content == HEADER + b",,,,2,\n"
    product_store.get_product.assert_not_called()


def test_generate_empty_order_header_only(product_store):
    """Test that an order with no items exports just the header."""
    order = Order(id=7, owner_id=1, status="completed", order_number="7")

    result = OrderCSVEmitter(product_store).generate(order)

    assert result.content == HEADER
    assert result.row_count == 0


def test_generate_empty_order_rejected_when_items_required(product_store):
    """Test the optional at-least-one-row policy."""
    order = Order(id=7, owner_id=1, status="completed")

    with pytest.raises(OrderHasNoItems):
        OrderCSVEmitter(product_store, require_line_items=True).generate(order)


def test_generate_preserves_item_order(product_store, widget):
    """Test that rows follow stored line item order, no re-sorting."""
    zebra = Product(id=2, sku="ZZZ-9", name="Zebra", regular_price="1.00")
    product_store.get_product = Mock(side_effect=lambda ref: {1: widget, 2: zebra}.get(ref))
    order = Order(
        id=1,
        owner_id=1,
        status="completed",
        line_items=(LineItem(2, 1), LineItem(99, 4), LineItem(1, 2)),
    )

    result = OrderCSVEmitter(product_store).generate(order)
    lines = result.content.decode("utf-8").splitlines()

    assert len(lines) == len(order.line_items) + 1
    assert lines[1].startswith("ZZZ-9,Zebra,1.00,,1,")
    assert lines[2] == ",,,,4,"
    assert lines[3] == "ABC-1,Widget,19.99,9.99,2,0123456789"


def test_generate_missing_attributes_are_empty(widget):
    """Test that absent wholesale price and barcode are empty, never 'null'."""
    store = Mock()
    store.get_product = Mock(return_value=widget)
    store.get_product_attribute = Mock(return_value=None)
    order = Order(id=1, owner_id=1, status="completed", line_items=(LineItem(1, 1),))

    result = OrderCSVEmitter(store).generate(order)

    assert result.content == HEADER + b"ABC-1,Widget,19.99,,1,\n"
    assert b"null" not in result.content.lower()
    assert b"None" not in result.content


def test_generate_column_count_constant(product_store):
    """Test that every row has the same number of columns as the header."""
    order = Order(
        id=1,
        owner_id=1,
        status="completed",
        line_items=(LineItem(1, 1), LineItem(42, 2), LineItem(None, 3)),
    )

    result = OrderCSVEmitter(product_store).generate(order)
    df = pl.read_csv(result.content, infer_schema_length=0)

    assert df.columns == ["SKU", "Product Name", "RRP", "Wholesale Price", "Quantity", "Barcode"]
    assert df.height == 3


def test_generate_product_lookup_failure_degrades(order_1042):
    """Test that a store error on one product does not abort the export."""
    store = Mock()
    store.get_product = Mock(side_effect=ConnectionError("store unavailable"))
    store.get_product_attribute = Mock(return_value=None)

    result = OrderCSVEmitter(store).generate(order_1042)

    assert result.content == HEADER + b",,,,3,\n"
    assert result.unresolved_items == [0]


def test_generate_attribute_lookup_failure_degrades(widget, order_1042):
    """Test that a failing attribute lookup only blanks that field."""
    def attribute(product_id, key):
        if key == "wcwp_wholesale":
            raise TimeoutError("meta lookup timed out")
        return "0123456789"

    store = Mock()
    store.get_product = Mock(return_value=widget)
    store.get_product_attribute = Mock(side_effect=attribute)

    result = OrderCSVEmitter(store).generate(order_1042)

    assert result.content == HEADER + b"ABC-1,Widget,19.99,,3,0123456789\n"
    assert result.unresolved_items == []


def test_generate_quotes_when_necessary():
    """Test standard CSV quoting for delimiters and quote characters."""
    gadget = Product(id=2, sku="GAD-2", name='Gadget, "Deluxe"', regular_price="5.00")
    store = Mock()
    store.get_product = Mock(return_value=gadget)
    store.get_product_attribute = Mock(return_value=None)
    order = Order(id=1, owner_id=1, status="completed", line_items=(LineItem(2, 1),))

    result = OrderCSVEmitter(store).generate(order)

    assert result.content == HEADER + b'GAD-2,"Gadget, ""Deluxe""",5.00,,1,\n'


def test_generate_utf8():
    """Test that non-ASCII product names are UTF-8 encoded."""
    store = Mock()
    store.get_product = Mock(return_value=Product(id=3, sku="CAF-1", name="Café crème", regular_price="4.50"))
    store.get_product_attribute = Mock(return_value=None)
    order = Order(id=1, owner_id=1, status="completed", line_items=(LineItem(3, 1),))

    result = OrderCSVEmitter(store).generate(order)

    assert "Café crème".encode("utf-8") in result.content


def test_generate_line_endings(product_store, order_1042):
    """Test LF by default and CRLF when configured, applied to every row."""
    lf = OrderCSVEmitter(product_store).generate(order_1042).content
    crlf = OrderCSVEmitter(product_store, line_terminator="\r\n").generate(order_1042).content

    assert b"\r\n" not in lf
    assert lf.count(b"\n") == 2
    assert crlf.count(b"\r\n") == 2
    assert crlf.replace(b"\r\n", b"\n") == lf


def test_generate_deterministic(product_store, order_1042):
    """Test that repeated generation produces identical bytes."""
    emitter = OrderCSVEmitter(product_store)

    hash1 = hashlib.sha256(emitter.generate(order_1042).content).hexdigest()
    hash2 = hashlib.sha256(emitter.generate(order_1042).content).hexdigest()

    assert hash1 == hash2


def test_generate_cancelled_mid_export(product_store):
    """Test that cancellation stops resolution and returns nothing."""
    order = Order(
        id=1,
        owner_id=1,
        status="completed",
        line_items=(LineItem(1, 1), LineItem(1, 2), LineItem(1, 3)),
    )
    checks = iter([False, True])

    with pytest.raises(ExportCancelled):
        OrderCSVEmitter(product_store).generate(order, is_cancelled=lambda: next(checks))

    assert product_store.get_product.call_count == 1


def test_generate_write_failure_raises_generation_failure(product_store, order_1042, monkeypatch):
    """Test that a CSV write error surfaces as GenerationFailure."""
    def broken_write(self, *args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(pl.DataFrame, "write_csv", broken_write)

    with pytest.raises(GenerationFailure) as exc_info:
        OrderCSVEmitter(product_store).generate(order_1042)

    assert exc_info.value.order_id == 1042
    assert "disk full" not in str(exc_info.value)


@pytest.mark.parametrize(
    "order_number, expected",
    [
        ("1042", "order_1042.csv"),
        ("#1042", "order_1042.csv"),
        ("../../etc/passwd", "order_etcpasswd.csv"),
        ("WC-2024_01", "order_WC-2024_01.csv"),
        ("12\r\n34", "order_1234.csv"),
        (None, "order_55.csv"),
        ("###", "order_55.csv"),
    ],
)
def test_export_filename(order_number, expected):
    """Test filename sanitizing and fallback to the order id."""
    order = Order(id=55, owner_id=1, status="completed", order_number=order_number)

    assert export_filename(order) == expected
