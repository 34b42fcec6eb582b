from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notevault.core.core import Service
from notevault.core.db import store_errors
from notevault.core.modules.user.models import User
from notevault.core.modules.user.validators import validate_email, validate_password, validate_username
from notevault.errors import InvalidCredentialsError, NotFoundError, ValidationError
from notevault.utils import now

logger = structlog.get_logger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def compare_password_hash(password: str, password_hash: str) -> bool:
    """Check a plain password against a bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


class UserService(Service):
    """Credential store for user accounts."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        # Compared against when the identifier is unknown, so both failure paths cost one bcrypt check
        self._dummy_hash: str | None = None

    async def on_start(self) -> None:
        """Create unique indexes for identifier lookups and prepare the dummy hash."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("username", 1)], unique=True)
        self._get_dummy_hash()

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password("notevault-dummy-password", self.core.config.bcrypt_rounds)
        return self._dummy_hash

    async def find_user_by_identifier(self, identifier: str) -> User | None:
        """Find user whose email or username equals identifier (exact match)."""
        with store_errors("find_user_by_identifier"):
            doc = await self._collection.find_one({"$or": [{"email": identifier}, {"username": identifier}]})
        return User.model_validate(doc) if doc else None

    async def find_user_by_id(self, user_id: UUID) -> User | None:
        with store_errors("find_user_by_id"):
            doc = await self._collection.find_one({"_id": user_id})
        return User.model_validate(doc) if doc else None

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID, raises NotFoundError if missing."""
        user = await self.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def verify_credentials(self, identifier: str, password: str) -> User:
        """Return the user matching identifier and password.

        Unknown identifier and wrong password raise the same error after the same amount of work.
        """
        user = await self.find_user_by_identifier(identifier)
        password_hash = user.password_hash if user else self._get_dummy_hash()
        if not compare_password_hash(password, password_hash) or user is None:
            logger.info("login_failed", reason="unknown_identifier" if user is None else "wrong_password")
            raise InvalidCredentialsError
        return user

    async def create_user(self, name: str, username: str, email: str, password: str) -> User:
        """Create user with hashed password."""
        if not name.strip():
            raise ValidationError("Name is required")
        validate_username(username)
        validate_email(email)
        validate_password(password)

        with store_errors("create_user"):
            if await self._collection.find_one({"username": username}):
                raise ValidationError("Username is already taken")
            if await self._collection.find_one({"email": email}):
                raise ValidationError("Email is already registered")
            user = User(name=name.strip(), username=username, email=email, password_hash=self._hash(password))
            await self._collection.insert_one(user.to_mongo())

        logger.info("user_created", user_id=user.id)
        return user

    async def update_profile(self, user_id: UUID, name: str, email: str) -> User:
        """Update display name and email, keeping email unique."""
        if not name.strip():
            raise ValidationError("Name is required")
        validate_email(email)

        user = await self.get_user(user_id)
        with store_errors("update_profile"):
            if email != user.email and await self._collection.find_one({"email": email}):
                raise ValidationError("Email is already in use")
            await self._collection.update_one(
                {"_id": user_id}, {"$set": {"name": name.strip(), "email": email, "updated_at": now()}}
            )
        return await self.get_user(user_id)

    async def change_password(self, user_id: UUID, current_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        user = await self.get_user(user_id)
        if not compare_password_hash(current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        validate_password(new_password)
        with store_errors("change_password"):
            await self._collection.update_one(
                {"_id": user_id}, {"$set": {"password_hash": self._hash(new_password), "updated_at": now()}}
            )
        logger.info("password_changed", user_id=user_id)

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a user together with their sessions and notes.

        Not atomic. The account goes first so a failure part way never leaves a
        usable account stripped of its notes; leftover sessions no longer resolve
        and leftover notes are unreachable.
        """
        await self.get_user(user_id)

        with store_errors("delete_user"):
            await self._collection.delete_one({"_id": user_id})
        logger.info("user_deleted", user_id=user_id)
        await self.core.services.session.delete_sessions_by_user(user_id)
        await self.core.services.note.delete_notes_by_owner(user_id)

    def _hash(self, password: str) -> str:
        return hash_password(password, self.core.config.bcrypt_rounds)
