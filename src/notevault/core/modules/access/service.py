from uuid import UUID

from notevault.core.core import Service
from notevault.core.modules.note.models import Note
from notevault.core.modules.session.models import AuthToken
from notevault.core.modules.user.models import User
from notevault.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken | None) -> User:
        """Ensure the user is authenticated."""
        return await self.core.services.session.require_user(auth_token)

    async def ensure_note_owner(self, auth_token: AuthToken | None, note_id: UUID) -> tuple[User, Note]:
        """Ensure the authenticated user owns the note, returning both."""
        user = await self.ensure_authenticated(auth_token)
        note = await self.core.services.note.get_note(note_id)
        if note.owner_id != user.id:
            raise AccessDeniedError("Access denied")
        return user, note
