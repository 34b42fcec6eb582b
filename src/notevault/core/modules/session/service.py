from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notevault.core.core import Service
from notevault.core.db import store_errors
from notevault.core.modules.session.models import AuthToken, LoginResult, Session
from notevault.core.modules.user.models import User
from notevault.errors import AuthenticationError, InvalidSignatureError, StoreUnavailableError, TokenExpiredError
from notevault.utils import now

logger = structlog.get_logger(__name__)

SESSION_TTL = timedelta(days=1)
REMEMBER_ME_TTL = timedelta(days=30)


class SessionService(Service):
    """Login, logout and current-user resolution.

    A session moves from active to expired (detected lazily on verification) or
    to revoked (explicit logout). Both end states mean "not authenticated".
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique index for token (for authentication lookups)
        await self._collection.create_index([("token", 1)], unique=True)
        # Single index for user_id (for cascading deletes)
        await self._collection.create_index([("user_id", 1)])
        # TTL index, sessions are purged only once the audit retention after expires_at has elapsed
        retention = timedelta(days=self.core.config.session_retention_days)
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=int(retention.total_seconds()))

    async def login(self, identifier: str, password: str, remember_me: bool = False) -> LoginResult:
        """Check credentials, issue a token and persist the matching session."""
        user = await self.core.services.user.verify_credentials(identifier, password)

        ttl = REMEMBER_ME_TTL if remember_me else SESSION_TTL
        issued = self.core.session_codec.issue({"sub": str(user.id)}, ttl)
        await self.create_session(user.id, AuthToken(issued.token), issued.expires_at, issued.issued_at)

        logger.info("login_succeeded", user_id=user.id, remember_me=remember_me)
        return LoginResult(user=user, token=AuthToken(issued.token), expires_at=issued.expires_at, ttl=ttl)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Revoke the session for auth_token.

        Never raises: the client must always end up logged out, so store
        failures are only logged.
        """
        if not auth_token:
            return
        try:
            revoked = await self.revoke_sessions_by_token(auth_token)
        except StoreUnavailableError:
            logger.warning("logout_revoke_failed")
            return
        logger.info("logout", revoked_sessions=revoked)

    async def resolve_user(self, auth_token: AuthToken | None) -> User | None:
        """Map a token to its user, or None when the token does not authenticate anyone."""
        if not auth_token:
            return None

        try:
            claims = self.core.session_codec.verify(auth_token)
        except TokenExpiredError:
            logger.debug("token_expired")
            return None
        except InvalidSignatureError:
            logger.info("token_invalid_signature")
            return None

        session = await self.find_session(auth_token)
        if session is None or not session.is_active(now()):
            logger.debug("session_inactive", found=session is not None)
            return None

        if claims.get("sub") != str(session.user_id):
            logger.warning("token_subject_mismatch", session_id=session.id)
            return None

        return await self.core.services.user.find_user_by_id(session.user_id)

    async def require_user(self, auth_token: AuthToken | None) -> User:
        """Resolve the acting user, raising AuthenticationError when there is none."""
        user = await self.resolve_user(auth_token)
        if user is None:
            raise AuthenticationError
        return user

    async def create_session(
        self, user_id: UUID, token: AuthToken, expires_at: datetime, created_at: datetime | None = None
    ) -> Session:
        session = Session(user_id=user_id, token=token, expires_at=expires_at, created_at=created_at or now())
        with store_errors("create_session"):
            await self._collection.insert_one(session.to_mongo())
        return session

    async def find_session(self, auth_token: AuthToken) -> Session | None:
        with store_errors("find_session"):
            doc = await self._collection.find_one({"token": auth_token})
        return Session.model_validate(doc) if doc else None

    async def revoke_sessions_by_token(self, auth_token: AuthToken) -> int:
        """Mark every session carrying auth_token as revoked; repeat calls are harmless."""
        with store_errors("revoke_sessions_by_token"):
            result = await self._collection.update_many({"token": auth_token}, {"$set": {"revoked": True}})
        return result.modified_count

    async def delete_sessions_by_user(self, user_id: UUID) -> int:
        """Delete all sessions of a user and return count of deleted sessions."""
        with store_errors("delete_sessions_by_user"):
            result = await self._collection.delete_many({"user_id": user_id})
        return result.deleted_count
