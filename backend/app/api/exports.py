"""
Export API endpoints for downloading an order's line items as CSV.

Customer and management entry points share one export service, so the
CSV bytes are identical for the same order.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from fastapi.responses import RedirectResponse, Response

from app.core.config import settings
from app.core.errors import InsufficientPrivilege, OrderExportError
from app.export.csv_emitter import export_filename
from app.export.records import ExportRequest, ExportResult, RequesterRole
from app.api.deps import (
    get_export_guard,
    get_export_service,
    get_identity,
    get_token_service,
)
from app.ports.identity import IdentityProvider, TokenService
from app.schemas.export import CsvLinkResponse, ErrorResponse
from app.services.authorization import ExportGuard
from app.services.export_service import OrderExportService

router = APIRouter()

# Largest id the order store (64-bit INTEGER) can hold
MAX_ORDER_ID = 2**63 - 1

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

EXPORT_ERROR_RESPONSES = {
    401: {"description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Export denied"},
    404: {"model": ErrorResponse, "description": "Order not found"},
    422: {"description": "Order id out of range"},
    500: {"model": ErrorResponse, "description": "CSV could not be generated"},
}


def _csv_response(result: ExportResult) -> Response:
    return Response(
        content=result.content,
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            **NO_CACHE_HEADERS,
        },
    )


def _run_export(service: OrderExportService, export_request: ExportRequest) -> Response:
    try:
        result = service.export(export_request)
    except OrderExportError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return _csv_response(result)


def _issue_link(
    order_id: int,
    role: RequesterRole,
    guard: ExportGuard,
    identity: IdentityProvider,
    token_service: TokenService,
    download_url,
) -> CsvLinkResponse:
    try:
        order = guard.check_access(order_id, role, identity.current_requester_id())
    except OrderExportError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

    token = token_service.issue_token(order.id)
    return CsvLinkResponse(
        order_id=order.id,
        filename=export_filename(order),
        token=token,
        url=str(download_url.include_query_params(token=token)),
        expires_in_minutes=settings.EXPORT_TOKEN_EXPIRE_MINUTES,
    )


@router.get(
    "/orders/export-csv",
    name="download_order_csv",
    responses=EXPORT_ERROR_RESPONSES,
)
def download_order_csv(
    order_id: int = Query(..., ge=1, le=MAX_ORDER_ID),
    token: Optional[str] = Query(None),
    identity: IdentityProvider = Depends(get_identity),
    service: OrderExportService = Depends(get_export_service),
):
    """
    Download a completed order's line items as CSV (customer).

    Requires a download token issued for this order. Returns the CSV as an
    attachment named order_<number>.csv.
    """
    export_request = ExportRequest(
        order_id=order_id,
        requester_id=identity.current_requester_id(),
        integrity_token=token,
        requester_role=RequesterRole.CUSTOMER,
    )
    return _run_export(service, export_request)


@router.get("/orders/{order_id}/csv-link", response_model=CsvLinkResponse)
def get_order_csv_link(
    request: Request,
    order_id: int = Path(..., ge=1, le=MAX_ORDER_ID),
    identity: IdentityProvider = Depends(get_identity),
    guard: ExportGuard = Depends(get_export_guard),
    token_service: TokenService = Depends(get_token_service),
):
    """Issue a signed download link for one of the requester's completed orders."""
    download_url = request.url_for("download_order_csv").include_query_params(order_id=order_id)
    return _issue_link(order_id, RequesterRole.CUSTOMER, guard, identity, token_service, download_url)


@router.get("/admin/orders/csv")
def admin_download_without_order(identity: IdentityProvider = Depends(get_identity)):
    """Management download called without an order: back to the order listing."""
    if not identity.current_requester_has_management_capability():
        error = InsufficientPrivilege()
        raise HTTPException(status_code=error.status_code, detail=error.to_detail())
    return RedirectResponse(url=settings.ORDER_LISTING_URL, status_code=303)


@router.get(
    "/admin/orders/{order_id}/csv",
    name="admin_download_order_csv",
    responses=EXPORT_ERROR_RESPONSES,
)
def admin_download_order_csv(
    order_id: int = Path(..., ge=1, le=MAX_ORDER_ID),
    token: Optional[str] = Query(None),
    identity: IdentityProvider = Depends(get_identity),
    service: OrderExportService = Depends(get_export_service),
):
    """Download any order's line items as CSV (shop managers, any status)."""
    export_request = ExportRequest(
        order_id=order_id,
        requester_id=identity.current_requester_id(),
        integrity_token=token,
        requester_role=RequesterRole.PRIVILEGED,
    )
    return _run_export(service, export_request)


@router.get("/admin/orders/{order_id}/csv-link", response_model=CsvLinkResponse)
def get_admin_order_csv_link(
    request: Request,
    order_id: int = Path(..., ge=1, le=MAX_ORDER_ID),
    identity: IdentityProvider = Depends(get_identity),
    guard: ExportGuard = Depends(get_export_guard),
    token_service: TokenService = Depends(get_token_service),
):
    """Issue a signed management download link for any order."""
    download_url = request.url_for("admin_download_order_csv", order_id=order_id)
    return _issue_link(order_id, RequesterRole.PRIVILEGED, guard, identity, token_service, download_url)
