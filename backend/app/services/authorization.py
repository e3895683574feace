"""
Authorization guard - decides whether a requester may export an order.

Checks, in order:
1. Integrity token is valid and bound to the requested order id
2. Privileged requesters hold the management capability
3. Order exists
4. Customers only: order is completed, then requester owns it

Pure read + decision; tokens are not consumed here.
"""
import logging
from typing import Any

from app.core.config import settings
from app.core.errors import (
    AuthError,
    InsufficientPrivilege,
    InvalidToken,
    NotOwner,
    OrderNotCompleted,
    OrderNotFound,
)
from app.export.records import ExportRequest, Order, RequesterRole
from app.ports.identity import IdentityProvider, TokenService
from app.ports.stores import OrderStore

logger = logging.getLogger(__name__)


class ExportGuard:
    """Single policy table for both customer and privileged entry points."""

    def __init__(
        self,
        order_store: OrderStore,
        token_service: TokenService,
        identity: IdentityProvider,
        completed_status: str | None = None,
    ):
        self.order_store = order_store
        self.token_service = token_service
        self.identity = identity
        self.completed_status = completed_status or settings.COMPLETED_STATUS

    def authorize(self, request: ExportRequest) -> Order:
        """
        Authorize an export request.

        Args:
            request: Inbound export request

        Returns:
            The order the requester may export

        Raises:
            AuthError: One of InvalidToken, OrderNotFound, NotOwner,
                OrderNotCompleted, InsufficientPrivilege
        """
        try:
            if not request.integrity_token or not self.token_service.verify_token(
                request.integrity_token, request.order_id
            ):
                raise InvalidToken(order_id=request.order_id)

            return self.check_access(request.order_id, request.requester_role, request.requester_id)
        except AuthError as e:
            logger.info(
                f"Export denied for order {request.order_id} "
                f"({request.requester_role.value}): {e.code}"
            )
            raise

    def check_access(self, order_id: int, role: RequesterRole, requester_id: Any) -> Order:
        """
        Apply the role policy without looking at the integrity token.

        Used on its own before issuing a download link.
        """
        if role is RequesterRole.PRIVILEGED:
            if not self.identity.current_requester_has_management_capability():
                raise InsufficientPrivilege(order_id=order_id)

        order = self.order_store.get_order(order_id)
        if order is None:
            raise OrderNotFound(order_id=order_id)

        if role is RequesterRole.CUSTOMER:
            if order.status != self.completed_status:
                raise OrderNotCompleted(order_id=order_id)
            if order.owner_id is None or str(order.owner_id) != str(requester_id):
                raise NotOwner(order_id=order_id)

        return order
