"""Persistence of user records keyed by email."""

from typing import Optional, Protocol
from uuid import uuid4

import asyncpg
import structlog

from login_api.exceptions import DuplicateEmail
from login_api.models.user import User, now_ms

logger = structlog.get_logger(__name__)

_USER_COLUMNS = "id, email, password_hash, first_name, last_name, is_active, created_at, updated_at"


class CredentialStore(Protocol):
    """Store of user records with unique emails.

    Uniqueness must be enforced by the store itself so that racing signups
    cannot both succeed.
    """

    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    async def exists_by_email(self, email: str) -> bool:
        ...

    async def save(self, user: User) -> User:
        """Insert when ``user.id`` is None, otherwise update. Returns the stored record."""
        ...

    async def delete_by_id(self, user_id: str) -> bool:
        ...

    async def count(self) -> int:
        ...


def _row_to_user(row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresCredentialStore:
    """CredentialStore backed by the ``users`` table via an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def find_by_email(self, email: str) -> Optional[User]:
        """Get a user by exact (case-sensitive) email.

        Args:
            email: Email to look up

        Returns:
            User model or None if not found
        """
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE email = $1
                """,
                email,
            )

        if row is None:
            return None
        return _row_to_user(row)

    async def exists_by_email(self, email: str) -> bool:
        async with self._pool.acquire() as conn:
            found = await conn.fetchval(
                "SELECT EXISTS(SELECT 1 FROM users WHERE email = $1)",
                email,
            )
        return bool(found)

    async def save(self, user: User) -> User:
        """Insert a new user or update an existing one.

        New records get a store-assigned id. Updates keep ``created_at`` and
        bump ``updated_at``.

        Args:
            user: Record to persist

        Returns:
            The persisted User

        Raises:
            DuplicateEmail: If another record already holds the email
        """
        if user.id is None:
            return await self._insert(user)
        return await self._upsert(user)

    async def _insert(self, user: User) -> User:
        stored = user.model_copy(update={"id": uuid4().hex})

        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO users ({_USER_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    """,
                    stored.id,
                    stored.email,
                    stored.password_hash,
                    stored.first_name,
                    stored.last_name,
                    stored.is_active,
                    stored.created_at,
                    stored.updated_at,
                )
        except asyncpg.UniqueViolationError:
            logger.warning("user_insert_duplicate_email")
            raise DuplicateEmail(user.email)

        logger.info("user_inserted", user_id=stored.id)
        return stored

    async def _upsert(self, user: User) -> User:
        now = now_ms()

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO users ({_USER_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    ON CONFLICT (id) DO UPDATE
                    SET email = EXCLUDED.email,
                        password_hash = EXCLUDED.password_hash,
                        first_name = EXCLUDED.first_name,
                        last_name = EXCLUDED.last_name,
                        is_active = EXCLUDED.is_active,
                        updated_at = EXCLUDED.updated_at
                    RETURNING {_USER_COLUMNS}
                    """,
                    user.id,
                    user.email,
                    user.password_hash,
                    user.first_name,
                    user.last_name,
                    user.is_active,
                    user.created_at,
                    now,
                )
        except asyncpg.UniqueViolationError:
            logger.warning("user_update_duplicate_email", user_id=user.id)
            raise DuplicateEmail(user.email)

        logger.info("user_updated", user_id=user.id)
        return _row_to_user(row)

    async def delete_by_id(self, user_id: str) -> bool:
        """Hard-delete a user.

        Returns:
            True if the user was deleted, False if not found
        """
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM users WHERE id = $1",
                user_id,
            )

        deleted = result == "DELETE 1"

        if deleted:
            logger.info("user_deleted", user_id=user_id)
        else:
            logger.warning("user_delete_not_found", user_id=user_id)

        return deleted

    async def count(self) -> int:
        async with self._pool.acquire() as conn:
            total = await conn.fetchval("SELECT COUNT(*) FROM users")
        return total
