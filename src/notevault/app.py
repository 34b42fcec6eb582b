from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from notevault.config import Config
from notevault.core.core import Core
from notevault.core.modules.export.models import ExportData
from notevault.core.modules.note.models import Note
from notevault.core.modules.session.models import AuthToken, LoginResult
from notevault.core.modules.user.models import User, UserView
from notevault.core.modules.user.service import compare_password_hash
from notevault.errors import InvalidCredentialsError


class App:
    """Facade for all application operations, resolves the acting user before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication ===
    async def login(self, identifier: str, password: str, remember_me: bool = False) -> LoginResult:
        """Authenticate user and create session."""
        return await self._core.services.session.login(identifier, password, remember_me)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Revoke the session; never fails."""
        await self._core.services.session.logout(auth_token)

    async def register(self, name: str, username: str, email: str, password: str) -> UserView:
        """Create a new account."""
        user = await self._core.services.user.create_user(name, username, email, password)
        return UserView.from_domain(user)

    async def resolve_user(self, auth_token: AuthToken | None) -> User | None:
        """Current user or None, never raises for auth failures."""
        return await self._core.services.session.resolve_user(auth_token)

    async def get_current_user(self, auth_token: AuthToken | None) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(current_user)

    def issue_csrf(self) -> str:
        return self._core.services.csrf.issue()

    def validate_csrf(self, method: str, cookie_token: str | None, header_token: str | None) -> bool:
        return self._core.services.csrf.validate(method, cookie_token, header_token)

    # === Notes ===
    async def get_notes(self, auth_token: AuthToken | None, tag: str | None = None, query: str | None = None) -> list[Note]:
        """Get notes of the current user, optionally filtered."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.list_notes(current_user.id, tag, query)

    async def get_note(self, auth_token: AuthToken | None, note_id: UUID) -> Note:
        """Get a note (owner only)."""
        _, note = await self._core.services.access.ensure_note_owner(auth_token, note_id)
        return note

    async def create_note(
        self, auth_token: AuthToken | None, title: str, content: str, color: str | None, tags: list[str] | None
    ) -> Note:
        """Create note owned by the current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.note.create_note(current_user.id, title, content, color, tags)

    async def update_note(
        self,
        auth_token: AuthToken | None,
        note_id: UUID,
        title: str | None = None,
        content: str | None = None,
        color: str | None = None,
        tags: list[str] | None = None,
    ) -> Note:
        """Update note fields (partial update, owner only)."""
        await self._core.services.access.ensure_note_owner(auth_token, note_id)
        return await self._core.services.note.update_note(note_id, title, content, color, tags)

    async def delete_note(self, auth_token: AuthToken | None, note_id: UUID) -> None:
        """Delete a note (owner only)."""
        await self._core.services.access.ensure_note_owner(auth_token, note_id)
        await self._core.services.note.delete_note(note_id)

    # === Account ===
    async def update_profile(self, auth_token: AuthToken | None, name: str, email: str) -> UserView:
        """Update name and email of the current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        user = await self._core.services.user.update_profile(current_user.id, name, email)
        return UserView.from_domain(user)

    async def change_password(self, auth_token: AuthToken | None, current_password: str, new_password: str) -> None:
        """Change password for current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.user.change_password(current_user.id, current_password, new_password)

    async def delete_account(self, auth_token: AuthToken | None, password: str) -> None:
        """Delete the current user after re-checking their password; notes and sessions go with it."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        if not compare_password_hash(password, current_user.password_hash):
            raise InvalidCredentialsError("Password is incorrect")
        await self._core.services.user.delete_user(current_user.id)

    async def export_user_data(self, auth_token: AuthToken | None) -> ExportData:
        """Export profile and all notes of the current user."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.export.export_user_data(current_user.id)
