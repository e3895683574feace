"""
Ports - interface definitions for external dependencies.

Follows hexagonal architecture pattern (ports & adapters).
Ports define interfaces, adapters provide concrete implementations.
"""
from app.ports.stores import OrderStore, ProductStore
from app.ports.identity import IdentityProvider, TokenService

__all__ = ["OrderStore", "ProductStore", "IdentityProvider", "TokenService"]
