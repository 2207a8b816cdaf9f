"""
infrastructure.persistence.profile_repo - SQLite profile repository.

Implements ProfileRepository port. Customer and owner profiles share one
shape and live in two tables; the factory creates one instance per table.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

from messhub.domain.entities import Profile
from messhub.domain.exceptions import DuplicateProfileError, NotFoundError
from messhub.infrastructure.persistence.connection import (
    AsyncSQLiteConnection,
    update_clause,
    utc_now,
)

logger = logging.getLogger(__name__)

CUSTOMER_PROFILES = "customer_profiles"
OWNER_PROFILES = "owner_profiles"

_TABLES = {CUSTOMER_PROFILES, OWNER_PROFILES}
_UPDATABLE = {"phone", "address", "is_completed"}


class SQLiteProfileRepository:
    """Async SQLite implementation of ProfileRepository."""

    def __init__(self, connection: AsyncSQLiteConnection, table: str):
        if table not in _TABLES:
            raise ValueError(f"Unknown profile table '{table}'. Allowed: {_TABLES}")
        self._conn = connection
        self._table = table

    async def save(self, profile: Profile) -> int:
        now = utc_now()
        try:
            async with self._conn.acquire() as conn:
                cursor = await conn.execute(
                    f"""INSERT INTO {self._table}
                        (account_id, phone, address, is_completed, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?)""",
                    (profile.account_id, profile.phone, profile.address,
                     int(profile.is_completed), now, now),
                )
                return cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            if "FOREIGN KEY" in str(exc):
                raise NotFoundError("User not found") from exc
            if "UNIQUE" in str(exc):
                raise DuplicateProfileError("Profile already exists for this account") from exc
            raise

    async def get_by_account(self, account_id: int) -> Optional[Profile]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM {self._table} WHERE account_id = ?", (account_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def update(self, account_id: int, fields: dict[str, Any]) -> bool:
        assignments, params = update_clause(fields, _UPDATABLE)
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                f"UPDATE {self._table} SET {assignments} WHERE account_id = ?",
                (*params, account_id),
            )
            return cursor.rowcount > 0

    async def list_all(self) -> list[Profile]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM {self._table} ORDER BY id",
            )
            return [self._row_to_entity(r) for r in rows]

    @staticmethod
    def _row_to_entity(row) -> Profile:
        return Profile(
            id=row["id"],
            account_id=row["account_id"],
            phone=row["phone"] or "",
            address=row["address"] or "",
            is_completed=bool(row["is_completed"]),
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
