from datetime import datetime
from uuid import UUID

from pydantic import Field

from notevault.core.db import MongoModel
from notevault.utils import now

DEFAULT_NOTE_COLOR = "bg-white dark:bg-dark-secondary"


class Note(MongoModel):
    """Personal note owned by a single user."""

    owner_id: UUID
    title: str
    content: str  # HTML produced by the editor, stored verbatim
    color: str = DEFAULT_NOTE_COLOR
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
