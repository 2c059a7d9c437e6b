from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from ..core.exceptions import AuthorizationError
from .model import CurrentUser

ALGORITHM = "HS256"


class TokenCodec:
    """Signs and verifies HS256 access tokens."""

    def __init__(self, secret: str, *, expires_hours: int = 24):
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self._expires = timedelta(hours=int(expires_hours))

    def encode(self, user: CurrentUser, *, now: datetime | None = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = dict(user.to_claims(), iat=issued, exp=issued + self._expires)
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> CurrentUser:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
            return CurrentUser.from_claims(claims)
        except (jwt.PyJWTError, KeyError, ValueError):
            raise AuthorizationError("Invalid or expired token") from None
