"""
infrastructure.persistence.review_repo - SQLite review repository.

Implements ReviewRepository port.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from messhub.domain.entities import Review
from messhub.infrastructure.persistence.connection import (
    AsyncSQLiteConnection,
    update_clause,
    utc_now,
)

logger = logging.getLogger(__name__)

_UPDATABLE = {"rating", "comment"}


class SQLiteReviewRepository:
    """Async SQLite implementation of ReviewRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, review: Review) -> int:
        now = utc_now()
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO reviews
                   (customer_id, mess_id, rating, comment, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (review.customer_id, review.mess_id, review.rating, review.comment, now, now),
            )
            return cursor.lastrowid

    async def get_by_id(self, review_id: int) -> Optional[Review]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM reviews WHERE id = ?", (review_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def search(
        self,
        mess_id: Optional[int] = None,
        customer_id: Optional[int] = None,
    ) -> list[Review]:
        clauses: list[str] = []
        params: list[Any] = []
        if mess_id is not None:
            clauses.append("mess_id = ?")
            params.append(mess_id)
        if customer_id is not None:
            clauses.append("customer_id = ?")
            params.append(customer_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM reviews {where} ORDER BY created_at DESC, id DESC", params,
            )
            return [self._row_to_entity(r) for r in rows]

    async def update(self, review_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = update_clause(fields, _UPDATABLE)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"UPDATE reviews SET {assignments} WHERE id = ?", (*params, review_id),
            )
            return cursor.rowcount > 0

    async def delete(self, review_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM reviews WHERE id = ?", (review_id,))
            return cursor.rowcount > 0

    async def ratings_for_mess(self, mess_id: int) -> list[int]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT rating FROM reviews WHERE mess_id = ?", (mess_id,),
            )
            return [r[0] for r in rows]

    @staticmethod
    def _row_to_entity(row) -> Review:
        return Review(
            id=row["id"],
            customer_id=row["customer_id"],
            mess_id=row["mess_id"],
            rating=row["rating"],
            comment=row["comment"],
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
