"""
Export service - orchestrates the order CSV export.

Pipeline:
1. Authorize the request (token, role policy, order lookup)
2. Resolve line items and emit CSV in memory
3. Return the finished document; the API layer sends it as an attachment

Nothing is returned unless the whole document was produced, so a failure
never reaches the client as a truncated file.
"""
import logging
from typing import Callable, Optional

from app.core.errors import ExportCancelled, GenerationFailure, OrderHasNoItems
from app.export.csv_emitter import OrderCSVEmitter
from app.export.records import ExportRequest, ExportResult
from app.services.authorization import ExportGuard

logger = logging.getLogger(__name__)


class OrderExportService:
    """
    Export service - authorize then generate.

    Both entry points (customer and management) go through here so they
    produce byte-identical CSV for the same order.
    """

    def __init__(self, guard: ExportGuard, emitter: OrderCSVEmitter):
        """
        Initialize export service.

        Args:
            guard: Authorization guard
            emitter: CSV emitter
        """
        self.guard = guard
        self.emitter = emitter

    def export(
        self,
        request: ExportRequest,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> ExportResult:
        """
        Export an order's line items as CSV.

        ``is_cancelled`` is forwarded to the emitter for library callers that
        can stop early; the HTTP handlers do not set it.

        Raises:
            AuthError: Request was denied (nothing generated)
            GenerationFailure: CSV could not be produced
        """
        order = self.guard.authorize(request)

        try:
            result = self.emitter.generate(order, is_cancelled=is_cancelled)
        except (ExportCancelled, OrderHasNoItems):
            raise
        except GenerationFailure:
            logger.error(f"CSV generation failed for order {order.id}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"CSV generation failed for order {order.id}: {e}", exc_info=True)
            raise GenerationFailure(order_id=order.id) from e

        if result.unresolved_items:
            logger.warning(
                f"Order {order.id} exported with {len(result.unresolved_items)} unresolved products "
                f"at positions {result.unresolved_items}"
            )
        logger.info(
            f"Exported order {order.id} ({request.requester_role.value}) "
            f"as {result.filename}: {result.row_count} rows"
        )
        return result
