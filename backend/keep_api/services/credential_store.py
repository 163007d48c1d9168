"""
Keep API — Credential Store
=============================

What:  Persists admin users (username + bcrypt hash) and checks logins.
Why:   Sole owner of the `users` table; no other module reads password hashes.

Contract:
    register(db, username, password)    → User, or DuplicateUsernameError
    find_by_username(db, username)      → User | None
    verify_password(password, hashed)   → bool (bcrypt.checkpw)
    authenticate(db, username, password)→ User, or InvalidCredentialsError

Side effects: one INSERT per registration. Users are never updated or
deleted here.

bcrypt is deliberately slow (work factor 10 ≈ tens of milliseconds), so
hashing and checking run in a worker thread instead of on the event loop.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.config import settings
from keep_api.exceptions import (
    DatabaseError,
    DuplicateUsernameError,
    InvalidCredentialsError,
)
from keep_api.models.user import User
from keep_api.security import passwords

logger = logging.getLogger(__name__)


class CredentialStore:
    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.bcrypt_rounds

    async def find_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def register(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Create an admin user.

        Raises:
            DuplicateUsernameError: username already taken (also when a
                concurrent insert wins the race and the unique index fires)
            DatabaseError: any other store failure
        """
        if await self.find_by_username(db, username) is not None:
            logger.info("Registration rejected, username taken: %s", username)
            raise DuplicateUsernameError(username)

        hashed = await asyncio.to_thread(passwords.hash_password, password, self.rounds)
        user = User(username=username, password=hashed)
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.info("Registration lost a race on username: %s", username)
            raise DuplicateUsernameError(username)
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error registering user",
                context={"error_type": type(e).__name__},
            )

        logger.info("User registered: id=%s username=%s", user.id, username)
        return user

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        return passwords.verify_password(password, hashed)

    async def authenticate(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Resolve a username/password pair into a User.

        Unknown usernames and wrong passwords raise the same
        InvalidCredentialsError.
        """
        user = await self.find_by_username(db, username)
        if user is None:
            logger.info("Login failed: unknown username")
            raise InvalidCredentialsError()

        ok = await asyncio.to_thread(self.verify_password, password, user.password)
        if not ok:
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError()
        return user
