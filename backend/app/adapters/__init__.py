"""
Adapters - concrete implementations of ports.

Follows hexagonal architecture pattern (ports & adapters).
Current implementations use lean stack (SQLite, signed JWT tokens).
"""
from app.adapters.repositories_sqlite import SQLiteOrderStore, SQLiteProductStore
from app.adapters.tokens_jwt import JWTTokenService
from app.adapters.identity_session import UserIdentity

__all__ = ["SQLiteOrderStore", "SQLiteProductStore", "JWTTokenService", "UserIdentity"]
