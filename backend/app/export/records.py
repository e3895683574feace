"""
Read-only records exchanged between the export core and its stores.

Stores hand out snapshots; the core never mutates them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

CSV_HEADERS: Tuple[str, ...] = (
    "SKU",
    "Product Name",
    "RRP",
    "Wholesale Price",
    "Quantity",
    "Barcode",
)


class RequesterRole(str, Enum):
    """Which entry point the request came through."""

    CUSTOMER = "customer"
    PRIVILEGED = "privileged"


@dataclass(frozen=True)
class ExportRequest:
    """One inbound export call."""

    order_id: int
    requester_id: Any
    integrity_token: Optional[str]
    requester_role: RequesterRole


@dataclass(frozen=True)
class LineItem:
    product_ref: Optional[int]
    quantity: int


@dataclass(frozen=True)
class Order:
    id: int
    owner_id: Any
    status: str
    order_number: Optional[str] = None
    line_items: Tuple[LineItem, ...] = ()

    @property
    def display_number(self) -> str:
        """Human-facing order number, falling back to the id."""
        return self.order_number or str(self.id)


@dataclass(frozen=True)
class Product:
    id: int
    sku: str = ""
    name: str = ""
    regular_price: str = ""


@dataclass(frozen=True)
class CsvRow:
    """One CSV line; every field is already rendered as text."""

    sku: str = ""
    name: str = ""
    rrp: str = ""
    wholesale_price: str = ""
    quantity: str = ""
    barcode: str = ""

    def as_list(self) -> List[str]:
        return [self.sku, self.name, self.rrp, self.wholesale_price, self.quantity, self.barcode]


@dataclass
class ExportResult:
    """Finished CSV document ready to be sent as an attachment."""

    filename: str
    content: bytes
    mime_type: str = "text/csv"
    row_count: int = 0
    unresolved_items: List[int] = field(default_factory=list)
