"""
CSV emitter - deterministic CSV generation for a single order.

Polars-based implementation:
- write_csv(include_header=True, separator=',', quote_style='necessary')
- All columns Utf8, missing values written as empty fields
- Rows kept in the order line items are stored on the order
- Header row is fixed and always present (even for zero items)

Byte-identical on repeated runs for the same order snapshot.
"""
import io
import logging
import re
from typing import Callable, List, Optional, Tuple

import polars as pl

from app.core.config import settings
from app.core.errors import ExportCancelled, GenerationFailure, OrderHasNoItems
from app.export.records import CSV_HEADERS, CsvRow, ExportResult, LineItem, Order
from app.ports.stores import ProductStore

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


def export_filename(order: Order) -> str:
    """
    Build the attachment filename for an order.

    Uses the display order number, stripped to [A-Za-z0-9_-]. Falls back to
    the order id when the number is missing or nothing survives stripping.
    """
    number = _UNSAFE_FILENAME_CHARS.sub("", order.display_number)
    if not number:
        number = _UNSAFE_FILENAME_CHARS.sub("", str(order.id))
    return f"order_{number}.csv"


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


class OrderCSVEmitter:
    """
    Emits the line-item CSV for an authorized order.

    Features:
    - One row per line item, stored order preserved
    - Missing products degrade to empty product fields (quantity kept)
    - Wholesale price and barcode read from product attributes
    - UTF-8, single line terminator, necessary quoting
    """

    def __init__(
        self,
        product_store: ProductStore,
        wholesale_price_key: Optional[str] = None,
        barcode_key: Optional[str] = None,
        line_terminator: Optional[str] = None,
        require_line_items: Optional[bool] = None,
    ):
        """
        Initialize CSV emitter.

        Args:
            product_store: Store used to resolve line item products
            wholesale_price_key: Attribute key for the wholesale price
            barcode_key: Attribute key for the barcode (GTIN/EAN/UPC)
            line_terminator: Line terminator applied to every row
            require_line_items: Raise OrderHasNoItems for empty orders
        """
        self.product_store = product_store
        self.wholesale_price_key = wholesale_price_key or settings.WHOLESALE_PRICE_META_KEY
        self.barcode_key = barcode_key or settings.BARCODE_META_KEY
        self.line_terminator = line_terminator or settings.CSV_LINE_TERMINATOR
        self.require_line_items = (
            settings.REQUIRE_LINE_ITEMS if require_line_items is None else require_line_items
        )

    def generate(
        self,
        order: Order,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> ExportResult:
        """
        Generate the CSV document for an order.

        Args:
            order: Authorized order snapshot
            is_cancelled: Optional check polled before each line item; when it
                returns True generation stops and nothing is returned. This is
                a hook for library callers: the HTTP handlers build the whole
                document before responding and do not pass one

        Returns:
            ExportResult with filename and CSV bytes

        Raises:
            OrderHasNoItems: Order is empty and line items are required
            ExportCancelled: Caller cancelled while rows were being resolved
            GenerationFailure: CSV could not be written
        """
        if self.require_line_items and not order.line_items:
            raise OrderHasNoItems(order_id=order.id)

        rows: List[CsvRow] = []
        unresolved: List[int] = []
        for position, item in enumerate(order.line_items):
            if is_cancelled is not None and is_cancelled():
                logger.info(
                    f"Export of order {order.id} cancelled after {position} of "
                    f"{len(order.line_items)} items"
                )
                raise ExportCancelled(order_id=order.id)

            row, resolved = self._resolve_row(item)
            rows.append(row)
            if not resolved:
                unresolved.append(position)

        content = self._write_csv(rows, order.id)

        return ExportResult(
            filename=export_filename(order),
            content=content,
            row_count=len(rows),
            unresolved_items=unresolved,
        )

    def _resolve_row(self, item: LineItem) -> Tuple[CsvRow, bool]:
        """Resolve one line item; returns (row, product_was_resolved)."""
        quantity = _text(item.quantity)

        if item.product_ref is None:
            return CsvRow(quantity=quantity), False

        try:
            product = self.product_store.get_product(item.product_ref)
        except Exception as e:
            logger.warning(f"Product {item.product_ref} lookup failed, emitting empty fields: {e}")
            return CsvRow(quantity=quantity), False

        if product is None:
            logger.warning(f"Product {item.product_ref} not found, emitting empty fields")
            return CsvRow(quantity=quantity), False

        return (
            CsvRow(
                sku=_text(product.sku),
                name=_text(product.name),
                rrp=_text(product.regular_price),
                wholesale_price=self._attribute(product.id, self.wholesale_price_key),
                quantity=quantity,
                barcode=self._attribute(product.id, self.barcode_key),
            ),
            True,
        )

    def _attribute(self, product_id: int, key: str) -> str:
        try:
            return _text(self.product_store.get_product_attribute(product_id, key))
        except Exception as e:
            logger.warning(f"Attribute {key} lookup failed for product {product_id}: {e}")
            return ""

    def _write_csv(self, rows: List[CsvRow], order_id: int) -> bytes:
        """Serialize rows (header first) into UTF-8 CSV bytes."""
        # Empty strings go in as nulls so they are written as bare empty fields
        columns = {header: [] for header in CSV_HEADERS}
        for row in rows:
            for header, value in zip(CSV_HEADERS, row.as_list()):
                columns[header].append(value or None)

        df = pl.DataFrame(columns, schema={header: pl.Utf8 for header in CSV_HEADERS})

        try:
            with io.BytesIO() as buffer:
                df.write_csv(
                    buffer,
                    include_header=True,
                    separator=",",
                    quote_style="necessary",
                    line_terminator=self.line_terminator,
                    null_value="",
                )
                return buffer.getvalue()
        except Exception as e:
            logger.error(f"Failed to write CSV for order {order_id}: {e}")
            raise GenerationFailure(order_id=order_id) from e
