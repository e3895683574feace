"""
Pydantic schemas for export API.
"""
from pydantic import BaseModel


class CsvLinkResponse(BaseModel):
    """Signed download link for an order CSV."""

    order_id: int
    filename: str
    token: str
    url: str
    expires_in_minutes: int


class ErrorDetail(BaseModel):
    """Body of a denied or failed export."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    detail: ErrorDetail
