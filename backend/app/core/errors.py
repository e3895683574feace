"""
Error taxonomy for order CSV exports.

Authorization failures are terminal for the request and never produce
partial content. Generation failures are kept separate so callers can log
them apart from denials.
"""


class OrderExportError(Exception):
    """Base class for export errors."""

    code = "EXPORT_ERROR"
    status_code = 500
    message = "Order export failed."

    def __init__(self, message: str | None = None, order_id: int | None = None):
        self.order_id = order_id
        super().__init__(message or self.message)

    def to_detail(self) -> dict:
        # Fixed per-class message; underlying causes stay in the log
        return {"code": self.code, "message": str(self)}


class AuthError(OrderExportError):
    """Requester is not entitled to export the order."""

    code = "AUTH_ERROR"
    status_code = 403
    message = "You do not have permission to download this file."


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    message = "Security check failed."


class OrderNotFound(AuthError):
    code = "ORDER_NOT_FOUND"
    status_code = 404
    message = "Order not found."


class NotOwner(AuthError):
    code = "NOT_OWNER"
    message = "You do not have permission to download this file."


class OrderNotCompleted(AuthError):
    code = "ORDER_NOT_COMPLETED"
    message = "You can only download the CSV for completed orders."


class InsufficientPrivilege(AuthError):
    code = "INSUFFICIENT_PRIVILEGE"
    message = "You do not have permission to perform this action."


class GenerationFailure(OrderExportError):
    """CSV could not be produced; nothing is sent to the requester."""

    code = "GENERATION_FAILURE"
    message = "CSV export could not be generated."


class ExportCancelled(GenerationFailure):
    code = "EXPORT_CANCELLED"
    message = "CSV export was cancelled before completion."


class OrderHasNoItems(GenerationFailure):
    code = "ORDER_HAS_NO_ITEMS"
    status_code = 422
    message = "Order has no line items to export."
