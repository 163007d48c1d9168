"""
Keep API — Note Service
=========================

What:  CRUD business logic for the public notes API.
Why:   Keeps SQL and error translation out of the route handlers.
How:   Each method receives the request's AsyncSession, runs its statements,
       flushes, and returns the post-mutation row. The commit happens in
       get_db_session once the handler returns.

Error Handling Strategy:
    Missing ids raise NotFoundError (404). Any SQLAlchemy failure is logged
    with its detail and re-raised as a DatabaseError carrying a generic,
    route-specific message (500).

Design Decision:
    NoteService is stateless; it receives the session for each call, so a
    single module-level instance is shared by all requests.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.exceptions import DatabaseError, NotFoundError
from keep_api.models.note import Note
from keep_api.services.validation import check_updatable_columns, is_storable_id

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - list_notes() / get_note(): reads
        - create_note(): insert and return the new row
        - replace_note() (PUT) / update_note() (PATCH): mutate and return
        - delete_note(): remove, NotFoundError when absent
    """

    UPDATABLE_COLUMNS = frozenset({"title", "content"})

    async def list_notes(self, db: AsyncSession) -> List[Note]:
        try:
            result = await db.execute(select(Note).order_by(Note.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching notes from the database",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: int) -> Note:
        """
        Retrieve a single note by id.

        Raises:
            NotFoundError: Note with given id does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        if not is_storable_id(note_id):
            raise NotFoundError(resource="note", resource_id=note_id)
        try:
            note = await db.get(Note, note_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message=f"Note with id: {note_id} could not be fetched, an error occurred.",
                context={"note_id": note_id},
            )
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def create_note(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str],
    ) -> Note:
        """Insert a note and return it with its newly assigned id."""
        try:
            note = Note(title=title, content=content)
            db.add(note)
            await db.flush()  # Assigns the autoincrement id
            await db.refresh(note)
            logger.info("Note created: %s", note.id)
            return note
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while creating the note.",
                context={"error_type": type(e).__name__},
            )

    async def replace_note(
        self,
        db: AsyncSession,
        note_id: int,
        title: str,
        content: str,
    ) -> Note:
        """Full replacement (PUT): both columns are overwritten."""
        return await self.update_note(db, note_id, {"title": title, "content": content})

    async def update_note(
        self,
        db: AsyncSession,
        note_id: int,
        changes: Dict[str, Any],
    ) -> Note:
        """
        Partial update (PATCH): write exactly the columns present in `changes`.

        Raises:
            ValidationError: empty payload or a key outside UPDATABLE_COLUMNS
            NotFoundError: no note with that id
            DatabaseError: statement failed
        """
        check_updatable_columns(changes, self.UPDATABLE_COLUMNS)

        note = await self.get_note(db, note_id)
        try:
            for column, value in changes.items():
                setattr(note, column, value)
            await db.flush()
            logger.info("Note %s updated: %s", note_id, ", ".join(sorted(changes)))
            return note
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Note with id: {note_id} not updated, an error occurred.",
                context={"note_id": note_id},
            )

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        note = await self.get_note(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
            logger.info("Note %s deleted", note_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Note with id: {note_id} not deleted, an error occurred.",
                context={"note_id": note_id},
            )


note_service = NoteService()
