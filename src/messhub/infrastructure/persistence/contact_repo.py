"""
infrastructure.persistence.contact_repo - SQLite contact message repository.

Implements ContactRepository port. Messages are never edited.
"""

from __future__ import annotations

import logging
from typing import Optional

from messhub.domain.entities import ContactMessage
from messhub.infrastructure.persistence.connection import AsyncSQLiteConnection, utc_now

logger = logging.getLogger(__name__)


class SQLiteContactRepository:
    """Async SQLite implementation of ContactRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, contact: ContactMessage) -> int:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO contact_messages
                   (author_account_id, name, email, message, created_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (contact.author_account_id, contact.name, contact.email,
                 contact.message, utc_now()),
            )
            return cursor.lastrowid

    async def get_by_id(self, contact_id: int) -> Optional[ContactMessage]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM contact_messages WHERE id = ?", (contact_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def list_all(self) -> list[ContactMessage]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM contact_messages ORDER BY created_at DESC, id DESC",
            )
            return [self._row_to_entity(r) for r in rows]

    async def delete(self, contact_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                "DELETE FROM contact_messages WHERE id = ?", (contact_id,),
            )
            return cursor.rowcount > 0

    async def delete_all(self) -> int:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM contact_messages")
            return cursor.rowcount

    @staticmethod
    def _row_to_entity(row) -> ContactMessage:
        return ContactMessage(
            id=row["id"],
            author_account_id=row["author_account_id"],
            name=row["name"] or "",
            email=row["email"] or "",
            message=row["message"] or "",
            created_at=row["created_at"] or "",
        )
