"""
Request-scoped dependencies for the export endpoints.

The current requester, stores and token service are resolved here and
passed into the guard and emitter explicitly.
"""
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.adapters.identity_session import UserIdentity
from app.adapters.repositories_sqlite import SQLiteOrderStore, SQLiteProductStore
from app.adapters.tokens_jwt import JWTTokenService
from app.core.database import get_db
from app.core.security import TokenError, decode_access_token
from app.export.csv_emitter import OrderCSVEmitter
from app.models import User
from app.ports.identity import IdentityProvider, TokenService
from app.services.authorization import ExportGuard
from app.services.export_service import OrderExportService

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the requester from the bearer access token."""
    unauthorized = HTTPException(
        status_code=401,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (TokenError, ValueError):
        raise unauthorized

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise unauthorized
    return user


def get_identity(user: User = Depends(get_current_user)) -> IdentityProvider:
    return UserIdentity(user)


def get_token_service() -> TokenService:
    return JWTTokenService()


def get_export_guard(
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity),
    token_service: TokenService = Depends(get_token_service),
) -> ExportGuard:
    return ExportGuard(SQLiteOrderStore(db), token_service, identity)


def get_csv_emitter(db: Session = Depends(get_db)) -> OrderCSVEmitter:
    return OrderCSVEmitter(SQLiteProductStore(db))


def get_export_service(
    guard: ExportGuard = Depends(get_export_guard),
    emitter: OrderCSVEmitter = Depends(get_csv_emitter),
) -> OrderExportService:
    return OrderExportService(guard, emitter)
