"""
Identity and token interfaces.

The current requester and the integrity-token issuer are passed into the
export core explicitly instead of being read from ambient request state.
"""
from abc import ABC, abstractmethod
from typing import Any


class IdentityProvider(ABC):
    """Who is making the current request."""

    @abstractmethod
    def current_requester_id(self) -> Any:
        pass

    @abstractmethod
    def current_requester_has_management_capability(self) -> bool:
        pass


class TokenService(ABC):
    """
    Issues and verifies integrity tokens for download links.

    A token is bound to a single order id and a single purpose. Tokens are
    reusable until they expire.
    """

    @abstractmethod
    def issue_token(self, order_id: int) -> str:
        pass

    @abstractmethod
    def verify_token(self, token: str, order_id: int) -> bool:
        pass
