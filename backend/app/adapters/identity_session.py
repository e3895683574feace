"""
Identity provider backed by the authenticated user record.
"""
from app.core.config import settings
from app.models import User
from app.ports.identity import IdentityProvider


class UserIdentity(IdentityProvider):
    """Identity of the user resolved from the request's access token."""

    def __init__(self, user: User, management_capability: str | None = None):
        self.user = user
        self.management_capability = management_capability or settings.MANAGEMENT_CAPABILITY

    def current_requester_id(self) -> int:
        return self.user.id

    def current_requester_has_management_capability(self) -> bool:
        return self.user.has_capability(self.management_capability)
