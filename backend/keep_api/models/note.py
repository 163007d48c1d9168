"""
Keep API — Note SQLAlchemy Model
==================================

What:  ORM model representing the `notes` table.
Why:   Maps rows to Python objects for the notes CRUD service.

Table Design:
    - Integer autoincrement primary key assigned by the store
    - title / content are both nullable: PATCH may leave either unset and
      the API never required them on the original table
    - No owner column: notes are shared, any caller may mutate any note
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from keep_api.database import Base


class Note(Base):
    """A free-form note with a title and a body."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}')>"
