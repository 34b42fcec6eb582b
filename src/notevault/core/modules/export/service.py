"""Export service for user data."""

from uuid import UUID

import structlog

from notevault.core.core import Service
from notevault.core.modules.export.models import ExportData, ExportNote
from notevault.core.modules.user.models import UserView

logger = structlog.get_logger(__name__)


class ExportService(Service):
    """Service for exporting a user's account data."""

    async def export_user_data(self, user_id: UUID) -> ExportData:
        user = await self.core.services.user.get_user(user_id)
        notes = await self.core.services.note.list_notes(user_id, order_by="created_at")

        logger.info("user_data_exported", user_id=user_id, note_count=len(notes))
        return ExportData(
            user=UserView.from_domain(user),
            notes=[
                ExportNote(
                    id=note.id,
                    title=note.title,
                    content=note.content,
                    color=note.color,
                    tags=note.tags,
                    created_at=note.created_at,
                    updated_at=note.updated_at,
                )
                for note in notes
            ],
        )
