"""
Keep API — Notes Route Handlers
=================================

What:  Public CRUD endpoints for notes.
How:   Extract path/body data, delegate to NoteService, shape the JSON reply.

    GET    /notes       list all notes
    GET    /note/{id}   fetch one note
    POST   /note        create (201)
    PUT    /note/{id}   full replace
    PATCH  /note/{id}   partial update
    DELETE /note/{id}   delete

No authentication: any caller may mutate any note.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.database import get_db_session
from keep_api.schemas.common import ErrorResponse, MessageResponse
from keep_api.schemas.note import (
    NoteCreate,
    NoteCreatedResponse,
    NoteReplace,
    NoteResponse,
    NoteUpdate,
    NoteUpdatedResponse,
)
from keep_api.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={**_SERVER_ERROR},
    summary="List all notes",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    return [NoteResponse.model_validate(note) for note in notes]


@router.get(
    "/note/{note_id}",
    response_model=NoteResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single note by id",
)
async def get_note(note_id: int, db: AsyncSession = Depends(get_db_session)) -> NoteResponse:
    note = await note_service.get_note(db, note_id)
    return NoteResponse.model_validate(note)


@router.post(
    "/note",
    response_model=NoteCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_SERVER_ERROR},
    summary="Create a note",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteCreatedResponse:
    note = await note_service.create_note(db, title=payload.title, content=payload.content)
    return NoteCreatedResponse(newNote=NoteResponse.model_validate(note))


@router.put(
    "/note/{note_id}",
    response_model=NoteUpdatedResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Replace a note",
)
async def replace_note(
    note_id: int,
    payload: NoteReplace,
    db: AsyncSession = Depends(get_db_session),
) -> NoteUpdatedResponse:
    note = await note_service.replace_note(
        db, note_id, title=payload.title, content=payload.content
    )
    return NoteUpdatedResponse(
        message=f"Note with id: {note_id} successfully updated.",
        updatedNote=NoteResponse.model_validate(note),
    )


@router.patch(
    "/note/{note_id}",
    response_model=NoteUpdatedResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Partially update a note",
    description="Only the fields present in the request body are written.",
)
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteUpdatedResponse:
    note = await note_service.update_note(db, note_id, payload.model_dump(exclude_unset=True))
    return NoteUpdatedResponse(
        message=f"Note with id: {note_id} successfully updated.",
        updatedNote=NoteResponse.model_validate(note),
    )


@router.delete(
    "/note/{note_id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(note_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await note_service.delete_note(db, note_id)
    return MessageResponse(message=f"Note with id: {note_id} successfully deleted.")
