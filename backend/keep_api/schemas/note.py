"""
Keep API — Note Request/Response Schemas
==========================================

What:  Pydantic models defining the API contract for the notes endpoints.
Why:   Input validation, serialization and OpenAPI doc generation.

Response envelope:
    Mutations return the affected row under a named key next to a
    human-readable message, e.g. {"message": "...", "newNote": {...}}.
    The camelCase keys are the established wire contract of the frontend.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteResponse(BaseModel):
    """Full representation of a note."""
    id: int = Field(description="Note identifier assigned by the store")
    title: Optional[str] = Field(default=None, description="Note title")
    content: Optional[str] = Field(default=None, description="Note body")

    model_config = ConfigDict(from_attributes=True)


class NoteCreate(BaseModel):
    """Body of POST /note."""
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)


class NoteReplace(BaseModel):
    """Body of PUT /note/{id}: the complete representation of the note."""
    title: str = Field(max_length=255)
    content: str


class NoteUpdate(BaseModel):
    """
    Body of PATCH /note/{id}.

    Only keys present in the payload are written; unknown keys are rejected.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)

    model_config = ConfigDict(extra="forbid")


class NoteCreatedResponse(BaseModel):
    message: str = "Note successfully created."
    newNote: NoteResponse


class NoteUpdatedResponse(BaseModel):
    message: str
    updatedNote: NoteResponse
