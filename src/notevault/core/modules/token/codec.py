"""Signed, time-limited bearer tokens.

Tokens are HS256 JWTs. Every token carries ``iat``, ``exp`` and a random
``jti``, so two tokens issued for the same payload within one second differ.
"""

import secrets
from datetime import datetime, timedelta
from typing import Any

import jwt
from pydantic import BaseModel

from notevault.errors import InvalidSignatureError, TokenExpiredError
from notevault.utils import now

ALGORITHM = "HS256"


class IssuedToken(BaseModel):
    """A freshly signed token together with its validity window."""

    token: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Issues and verifies tokens signed with a single symmetric secret."""

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def issue(self, payload: dict[str, Any], ttl: timedelta, issued_at: datetime | None = None) -> IssuedToken:
        """Sign payload with issued-at and expiry claims.

        issued_at is truncated to whole seconds so that expires_at matches the
        ``exp`` claim exactly.
        """
        issued_at = (issued_at or now()).replace(microsecond=0)
        expires_at = issued_at + ttl
        claims = {
            **payload,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        token = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the token claims.

        Raises:
            TokenExpiredError: signature is valid but ``exp`` has passed
            InvalidSignatureError: token is malformed or signed with another secret
        """
        try:
            return jwt.decode(token, self._secret, algorithms=[ALGORITHM], options={"require": ["iat", "exp"]})
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidSignatureError("Token signature invalid") from e
