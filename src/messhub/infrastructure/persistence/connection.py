"""
infrastructure.persistence.connection - Async SQLite connection manager.

Wraps aiosqlite with a context manager pattern: every acquire() is one
unit of work that commits on success and rolls back on exception.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)


def utc_now() -> str:
    """Timestamp format used for every created_at / updated_at column."""
    return datetime.now(timezone.utc).isoformat()


class AsyncSQLiteConnection:
    """Async SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str):
        self._db_path = db_path

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield an async SQLite connection with FK support.

        Commits on success, rolls back on exception.
        """
        async with aiosqlite.connect(self._db_path) as conn:
            await conn.execute("PRAGMA foreign_keys = ON")
            conn.row_factory = aiosqlite.Row
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.debug("Database operation failed, transaction rolled back.")
                raise

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Like acquire(), but takes the write lock up front.

        Reads made inside the block see the same snapshot the final write
        commits against, so multi-step checks-then-insert are atomic.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            yield conn


def update_clause(fields: dict[str, Any], allowed: set[str]) -> tuple[str, list[Any]]:
    """Build "a = ?, b = ?, updated_at = ?" and its parameters.

    Booleans are stored as 0/1. Raises ValueError on fields outside *allowed*.
    """
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Invalid fields {sorted(unknown)}. Allowed: {sorted(allowed)}")
    names = [*fields, "updated_at"]
    params = [int(v) if isinstance(v, bool) else v for v in fields.values()]
    params.append(utc_now())
    return ", ".join(f"{name} = ?" for name in names), params
