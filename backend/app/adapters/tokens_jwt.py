"""
JWT implementation of the integrity-token service.

Each token is signed with SECRET_KEY and carries the action name and the
order id it was issued for. Verification rejects expired tokens, tokens for
another action and tokens for another order. Tokens are not consumed on use.
"""
import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.core.config import settings
from app.ports.identity import TokenService

logger = logging.getLogger(__name__)


class JWTTokenService(TokenService):
    """Signed, expiring, single-purpose download tokens."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        action: str | None = None,
        expire_minutes: int | None = None,
    ):
        self.secret_key = secret_key or settings.SECRET_KEY
        self.algorithm = algorithm or settings.ALGORITHM
        self.action = action or settings.EXPORT_TOKEN_ACTION
        self.expire_minutes = expire_minutes or settings.EXPORT_TOKEN_EXPIRE_MINUTES

    def issue_token(self, order_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "act": self.action,
            "oid": int(order_id),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str, order_id: int) -> bool:
        if not token:
            return False

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Integrity token rejected for order {order_id}: {e}")
            return False

        return payload.get("act") == self.action and payload.get("oid") == int(order_id)
