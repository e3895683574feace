"""
Export module for order CSV generation.

The emitter lives in app.export.csv_emitter; only the record types are
re-exported here because the store ports depend on them.
"""
from app.export.records import (
    CSV_HEADERS,
    CsvRow,
    ExportRequest,
    ExportResult,
    LineItem,
    Order,
    Product,
    RequesterRole,
)

__all__ = [
    "CSV_HEADERS",
    "CsvRow",
    "ExportRequest",
    "ExportResult",
    "LineItem",
    "Order",
    "Product",
    "RequesterRole",
]
