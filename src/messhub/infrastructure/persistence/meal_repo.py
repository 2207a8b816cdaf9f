"""
infrastructure.persistence.meal_repo - SQLite meal repository.

Implements MealRepository port.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from messhub.domain.entities import Meal
from messhub.infrastructure.persistence.connection import (
    AsyncSQLiteConnection,
    update_clause,
    utc_now,
)

logger = logging.getLogger(__name__)

_UPDATABLE = {"name", "meal_type", "is_veg", "description", "price", "is_available"}


class SQLiteMealRepository:
    """Async SQLite implementation of MealRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, meal: Meal) -> int:
        now = utc_now()
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO meals
                   (mess_id, name, meal_type, is_veg, description, price, is_available,
                    created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (meal.mess_id, meal.name, meal.meal_type, int(meal.is_veg),
                 meal.description, meal.price, int(meal.is_available), now, now),
            )
            return cursor.lastrowid

    async def get_by_id(self, meal_id: int) -> Optional[Meal]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM meals WHERE id = ?", (meal_id,),
            )
            return self.row_to_entity(rows[0]) if rows else None

    async def search(
        self,
        mess_id: Optional[int] = None,
        meal_type: Optional[str] = None,
        is_veg: Optional[bool] = None,
        is_available: Optional[bool] = None,
    ) -> list[Meal]:
        clauses: list[str] = []
        params: list[Any] = []
        if mess_id is not None:
            clauses.append("mess_id = ?")
            params.append(mess_id)
        if meal_type:
            clauses.append("meal_type = ?")
            params.append(meal_type)
        if is_veg is not None:
            clauses.append("is_veg = ?")
            params.append(int(is_veg))
        if is_available is not None:
            clauses.append("is_available = ?")
            params.append(int(is_available))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM meals {where} ORDER BY created_at DESC, id DESC",
                params,
            )
            return [self.row_to_entity(r) for r in rows]

    async def update(self, meal_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = update_clause(fields, _UPDATABLE)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"UPDATE meals SET {assignments} WHERE id = ?", (*params, meal_id),
            )
            return cursor.rowcount > 0

    async def delete(self, meal_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM meals WHERE id = ?", (meal_id,))
            return cursor.rowcount > 0

    @staticmethod
    def row_to_entity(row) -> Meal:
        return Meal(
            id=row["id"],
            mess_id=row["mess_id"],
            name=row["name"] or "",
            meal_type=row["meal_type"] or "",
            is_veg=bool(row["is_veg"]),
            description=row["description"] or "",
            price=row["price"] or 0.0,
            is_available=bool(row["is_available"]),
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
