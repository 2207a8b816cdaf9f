"""
infrastructure.persistence.account_repo - SQLite account repository.

Implements AccountRepository port. Emails are stored lower-cased and
trimmed; the UNIQUE constraint on the column is the source of truth for
duplicate detection.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from messhub.domain.entities import Account
from messhub.domain.exceptions import DuplicateEmailError
from messhub.infrastructure.persistence.connection import AsyncSQLiteConnection, utc_now

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SQLiteAccountRepository:
    """Async SQLite implementation of AccountRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, account: Account) -> int:
        email = normalize_email(account.email)
        try:
            async with self._conn.acquire() as conn:
                cursor = await conn.execute(
                    """INSERT INTO accounts (role, name, email, password_hash, created_at)
                       VALUES (?, ?, ?, ?, ?)""",
                    (account.role, account.name, email, account.password_hash, utc_now()),
                )
                return cursor.lastrowid
        except sqlite3.IntegrityError:
            raise DuplicateEmailError("User with this email already exists")

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM accounts WHERE id = ?", (account_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def get_by_email(self, email: str) -> Optional[Account]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM accounts WHERE email = ?", (normalize_email(email),),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def list_all(self) -> list[Account]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM accounts ORDER BY id",
            )
            return [self._row_to_entity(r) for r in rows]

    @staticmethod
    def _row_to_entity(row) -> Account:
        return Account(
            id=row["id"],
            role=row["role"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"] or "",
        )
