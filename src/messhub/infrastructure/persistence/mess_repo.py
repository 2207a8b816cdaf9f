"""
infrastructure.persistence.mess_repo - SQLite mess repository.

Implements MessRepository port. Text filters are case-insensitive
substring matches; results are newest first.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from messhub.domain.entities import Mess
from messhub.infrastructure.persistence.connection import (
    AsyncSQLiteConnection,
    update_clause,
    utc_now,
)

logger = logging.getLogger(__name__)

_UPDATABLE = {"name", "area", "phone", "address", "description", "is_active"}


class SQLiteMessRepository:
    """Async SQLite implementation of MessRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, mess: Mess) -> int:
        now = utc_now()
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO messes
                   (owner_id, name, area, phone, address, description, is_active,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (mess.owner_id, mess.name, mess.area, mess.phone, mess.address,
                 mess.description, int(mess.is_active), now, now),
            )
            return cursor.lastrowid

    async def get_by_id(self, mess_id: int) -> Optional[Mess]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM messes WHERE id = ?", (mess_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def search(
        self,
        area: Optional[str] = None,
        text: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> list[Mess]:
        clauses: list[str] = []
        params: list[Any] = []
        if area:
            clauses.append("instr(lower(area), lower(?)) > 0")
            params.append(area)
        if text:
            clauses.append(
                "(instr(lower(name), lower(?)) > 0 OR instr(lower(description), lower(?)) > 0)"
            )
            params.extend([text, text])
        if is_active is not None:
            clauses.append("is_active = ?")
            params.append(int(is_active))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM messes {where} ORDER BY created_at DESC, id DESC",
                params,
            )
            return [self._row_to_entity(r) for r in rows]

    async def list_by_owner(self, owner_id: int) -> list[Mess]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM messes WHERE owner_id = ? ORDER BY created_at DESC, id DESC",
                (owner_id,),
            )
            return [self._row_to_entity(r) for r in rows]

    async def update(self, mess_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = update_clause(fields, _UPDATABLE)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"UPDATE messes SET {assignments} WHERE id = ?", (*params, mess_id),
            )
            return cursor.rowcount > 0

    async def delete(self, mess_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM messes WHERE id = ?", (mess_id,))
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_entity(row) -> Mess:
        return Mess(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"] or "",
            area=row["area"] or "",
            phone=row["phone"] or "",
            address=row["address"] or "",
            description=row["description"] or "",
            is_active=bool(row["is_active"]),
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
