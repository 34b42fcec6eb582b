"""Export models for personal data portability."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from notevault.core.modules.user.models import UserView


class ExportNote(BaseModel):
    """Note representation for export, without owner reference."""

    id: UUID
    title: str
    content: str
    color: str
    tags: list[str]
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class ExportData(BaseModel):
    """Everything stored for one account, minus credentials."""

    user: UserView
    notes: list[ExportNote] = Field(..., description="All notes of the user, newest first")
