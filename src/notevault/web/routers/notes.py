from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from notevault.core.modules.note.models import Note
from notevault.web.deps import AppDep, AuthTokenDep, CsrfDep
from notevault.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["notes"])


class CreateNoteRequest(BaseModel):
    """Request to create a new note."""

    title: str = Field("", description="Note title (required)")
    content: str = Field("", description="Note body as HTML (required)")
    color: str | None = Field(None, description="CSS classes for the card background")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")


class UpdateNoteRequest(BaseModel):
    """Request to update a note (partial update, omitted fields are kept)."""

    title: str | None = None
    content: str | None = None
    color: str | None = None
    tags: list[str] | None = None


@router.get(
    "/notes",
    summary="List notes",
    description="Get notes of the current user, most recently updated first. "
    "`tag` keeps notes carrying that tag; `query` matches title or content case-insensitively.",
    operation_id="listNotes",
    responses={
        200: {"description": "List of notes"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_notes(
    app: AppDep,
    auth_token: AuthTokenDep,
    tag: Annotated[str | None, Query(description="Only notes with this tag")] = None,
    query: Annotated[str | None, Query(description="Search in title and content")] = None,
) -> list[Note]:
    return await app.get_notes(auth_token, tag, query)


@router.post(
    "/notes",
    summary="Create note",
    description="Create a note owned by the current user.",
    operation_id="createNote",
    status_code=201,
    dependencies=[CsrfDep],
    responses={
        201: {"description": "Note created successfully"},
        400: {"model": ErrorResponse, "description": "Title or content missing"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def create_note(request: CreateNoteRequest, app: AppDep, auth_token: AuthTokenDep) -> Note:
    return await app.create_note(auth_token, request.title, request.content, request.color, request.tags)


@router.get(
    "/notes/{note_id}",
    summary="Get note",
    description="Get a single note. Only its owner can read it.",
    operation_id="getNote",
    responses={
        200: {"description": "Note details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Note belongs to another user"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def get_note(note_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> Note:
    return await app.get_note(auth_token, note_id)


@router.put(
    "/notes/{note_id}",
    summary="Update note",
    description="Update fields of a note. Omitted fields remain unchanged.",
    operation_id="updateNote",
    dependencies=[CsrfDep],
    responses={
        200: {"description": "Note updated successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Note belongs to another user or CSRF check failed"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def update_note(note_id: UUID, request: UpdateNoteRequest, app: AppDep, auth_token: AuthTokenDep) -> Note:
    return await app.update_note(auth_token, note_id, request.title, request.content, request.color, request.tags)


@router.delete(
    "/notes/{note_id}",
    summary="Delete note",
    description="Delete a note permanently.",
    operation_id="deleteNote",
    status_code=204,
    dependencies=[CsrfDep],
    responses={
        204: {"description": "Note deleted successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Note belongs to another user or CSRF check failed"},
        404: {"model": ErrorResponse, "description": "Note not found"},
    },
)
async def delete_note(note_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_note(auth_token, note_id)
