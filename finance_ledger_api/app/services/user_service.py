"""
Business logic for users.

``UserService`` handles signup, lookups and password authentication
against the ``users`` table.  Passwords are stored only as the output
of ``CredentialHasher``.
"""

import logging
import sqlite3
from typing import Optional

from ..core.db import execute, fetch_one
from ..core.errors import AuthError, AuthErrorKind, NotFoundError
from ..core.security import CredentialHasher, get_hasher
from ..schemas.user import UserCreate, UserRead


logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, username, email, created_at"


def _to_read(row: sqlite3.Row) -> UserRead:
    return UserRead(
        id=row["id"],
        username=row["username"],
        email=row["email"],
        created_at=row["created_at"],
    )


class UserService:
    """Signup, lookup and login for users."""

    @classmethod
    async def create_user(cls, data: UserCreate, hasher: Optional[CredentialHasher] = None) -> UserRead:
        """Hash the password and insert a new user.

        A duplicate username or e-mail surfaces as ``sqlite3.IntegrityError``.
        """
        hasher = hasher or get_hasher()
        logger.info("Registering user %s", data.username)
        password_hash = hasher.hash(hasher.prepare(data.password))
        user_id, _ = await execute(
            "INSERT INTO users (username, password, email) VALUES (?, ?, ?)",
            (data.username, password_hash, data.email),
        )
        return await cls.get_user_by_id(user_id)

    @classmethod
    async def get_user_by_username(cls, username: str) -> UserRead:
        row = await fetch_one(
            f"SELECT {_USER_COLUMNS} FROM users WHERE username = ?", (username,)
        )
        if row is None:
            raise NotFoundError(f"User {username} not found")
        return _to_read(row)

    @classmethod
    async def get_user_by_id(cls, user_id: int) -> UserRead:
        row = await fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,))
        if row is None:
            raise NotFoundError(f"User {user_id} not found")
        return _to_read(row)

    @classmethod
    async def authenticate(
        cls, username: str, password: str, hasher: Optional[CredentialHasher] = None
    ) -> UserRead:
        """Check ``password`` for ``username`` and return the user.

        Raises ``NotFoundError`` for an unknown username and
        ``AuthError(UNAUTHORIZED)`` for a wrong password.
        """
        hasher = hasher or get_hasher()
        row = await fetch_one(
            f"SELECT {_USER_COLUMNS}, password FROM users WHERE username = ?", (username,)
        )
        if row is None:
            raise NotFoundError(f"User {username} not found")
        if not hasher.verify(hasher.prepare(password), row["password"]):
            logger.warning("Failed login for user %s", username)
            raise AuthError(AuthErrorKind.UNAUTHORIZED, "Invalid credentials")
        return _to_read(row)
