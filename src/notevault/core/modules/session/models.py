"""Session management models."""

from datetime import datetime, timedelta
from typing import NewType
from uuid import UUID

from pydantic import BaseModel, Field

from notevault.core.db import MongoModel
from notevault.core.modules.user.models import User
from notevault.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """One issued bearer token.

    Revoked on logout rather than deleted, so history stays available for audit.
    Indexed on token - unique, user_id.
    """

    user_id: UUID
    token: str
    expires_at: datetime
    revoked: bool = False
    created_at: datetime = Field(default_factory=now)

    def is_active(self, at: datetime) -> bool:
        """Valid only while not revoked and before expiry."""
        return not self.revoked and at < self.expires_at


class LoginResult(BaseModel):
    """Outcome of a successful login, ready for cookie delivery."""

    user: User
    token: AuthToken
    expires_at: datetime
    ttl: timedelta

    @property
    def max_age(self) -> int:
        """Cookie max-age in seconds, matching the token lifetime."""
        return int(self.ttl.total_seconds())
