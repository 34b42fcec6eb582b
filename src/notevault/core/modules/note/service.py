import re
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from notevault.core.core import Service
from notevault.core.db import store_errors
from notevault.core.modules.note.models import DEFAULT_NOTE_COLOR, Note
from notevault.errors import NotFoundError, ValidationError
from notevault.utils import now

logger = structlog.get_logger(__name__)


class NoteService(Service):
    """Plain record store for personal notes."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notes")

    async def on_start(self) -> None:
        """Create index for per-owner listing."""
        await self._collection.create_index([("owner_id", 1), ("updated_at", -1)])

    async def list_notes(
        self, owner_id: UUID, tag: str | None = None, query: str | None = None, order_by: str = "updated_at"
    ) -> list[Note]:
        """Get notes of one owner, newest first by order_by.

        Args:
            owner_id: The user whose notes are listed
            tag: Only notes carrying this tag
            query: Case-insensitive substring matched against title or content
            order_by: Timestamp field to sort on, descending
        """
        mongo_query: dict[str, Any] = {"owner_id": owner_id}
        if tag:
            mongo_query["tags"] = tag
        if query:
            pattern = {"$regex": re.escape(query), "$options": "i"}
            mongo_query["$or"] = [{"title": pattern}, {"content": pattern}]

        with store_errors("list_notes"):
            docs = await self._collection.find(mongo_query).sort(order_by, -1).to_list()
        logger.debug("list_notes", owner_id=owner_id, tag=tag, query=query, returned=len(docs))
        return [Note.model_validate(doc) for doc in docs]

    async def get_note(self, note_id: UUID) -> Note:
        """Get note by ID."""
        with store_errors("get_note"):
            doc = await self._collection.find_one({"_id": note_id})
        if not doc:
            raise NotFoundError("Note not found")
        return Note.model_validate(doc)

    async def create_note(
        self, owner_id: UUID, title: str, content: str, color: str | None = None, tags: list[str] | None = None
    ) -> Note:
        """Create note; title and content are required."""
        if not title:
            raise ValidationError("Title is required")
        if not content:
            raise ValidationError("Content is required")

        note = Note(owner_id=owner_id, title=title, content=content, color=color or DEFAULT_NOTE_COLOR, tags=tags or [])
        with store_errors("create_note"):
            await self._collection.insert_one(note.to_mongo())
        return note

    async def update_note(
        self,
        note_id: UUID,
        title: str | None = None,
        content: str | None = None,
        color: str | None = None,
        tags: list[str] | None = None,
    ) -> Note:
        """Update note (partial update).

        Parameters left as None keep their stored value.
        """
        update_doc: dict[str, Any] = {"updated_at": now()}
        for name, value in (("title", title), ("content", content), ("color", color), ("tags", tags)):
            if value is not None:
                update_doc[name] = value

        with store_errors("update_note"):
            await self._collection.update_one({"_id": note_id}, {"$set": update_doc})
        return await self.get_note(note_id)

    async def delete_note(self, note_id: UUID) -> None:
        with store_errors("delete_note"):
            await self._collection.delete_one({"_id": note_id})

    async def delete_notes_by_owner(self, owner_id: UUID) -> int:
        """Delete all notes of a user and return count of deleted notes."""
        with store_errors("delete_notes_by_owner"):
            result = await self._collection.delete_many({"owner_id": owner_id})
        return result.deleted_count
