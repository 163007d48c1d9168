"""
Keep API — User SQLAlchemy Model
==================================

What:  Admin identity record owned by the CredentialStore.
Lifecycle:
    Created by POST /register. Never updated or deleted by this system;
    the username is immutable after creation.

Security:
    `password` holds the bcrypt hash string (salt and cost factor are
    embedded in it). Plaintext passwords never reach this table.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from keep_api.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        # Never include the password hash
        return f"<User(id={self.id}, username='{self.username}')>"
