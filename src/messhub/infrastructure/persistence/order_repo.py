"""
infrastructure.persistence.order_repo - SQLite order repository.

Implements OrderRepository port. Line items are stored as a JSON array of
value snapshots in the items column, so later catalog changes never alter
past orders.

place() is the only multi-step write in the system: the meal checks and
the insert run inside one BEGIN IMMEDIATE transaction, so a meal cannot be
deleted or switched off between the check and the insert.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Optional

from messhub.domain.entities import Order, OrderItem, order_total
from messhub.domain.exceptions import MealNotFoundError, MealUnavailableError
from messhub.infrastructure.persistence.connection import AsyncSQLiteConnection, utc_now

logger = logging.getLogger(__name__)

_ORDER_BY = "ORDER BY created_at DESC, id DESC"


class SQLiteOrderRepository:
    """Async SQLite implementation of OrderRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def place(self, order: Order, *, use_catalog_prices: bool = False) -> Order:
        """Check every referenced meal, then insert the order atomically.

        Raises MealNotFoundError / MealUnavailableError and leaves nothing
        behind if any line fails. With use_catalog_prices=True each line's
        unit_price is replaced by the meal's current price before the total
        is computed.
        """
        async with self._conn.transaction() as conn:
            items: list[OrderItem] = []
            for item in order.items:
                rows = await conn.execute_fetchall(
                    "SELECT price, is_available FROM meals WHERE id = ?", (item.meal_id,),
                )
                if not rows:
                    raise MealNotFoundError(f"Meal with ID {item.meal_id} not found")
                if not rows[0]["is_available"]:
                    raise MealUnavailableError(f"Meal with ID {item.meal_id} is not available")
                if use_catalog_prices:
                    item = replace(item, unit_price=rows[0]["price"])
                items.append(item)

            now = utc_now()
            placed = replace(
                order, items=items, total_amount=order_total(items),
                created_at=now, updated_at=now,
            )
            cursor = await conn.execute(
                """INSERT INTO orders
                   (customer_id, items, total_amount, delivery_address, delivery_phone,
                    status, payment_method, payment_status, payment_id, notes,
                    delivery_time, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (placed.customer_id, _dump_items(items), placed.total_amount,
                 placed.delivery_address, placed.delivery_phone, placed.status,
                 placed.payment_method, placed.payment_status, placed.payment_id,
                 placed.notes, placed.delivery_time, now, now),
            )
            placed.id = cursor.lastrowid
        return placed

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM orders WHERE id = ?", (order_id,),
            )
            return self._row_to_entity(rows[0]) if rows else None

    async def list_all(self) -> list[Order]:
        return await self._select("", ())

    async def list_by_customer(self, customer_id: int) -> list[Order]:
        return await self._select("WHERE customer_id = ?", (customer_id,))

    async def list_by_status(self, status: str) -> list[Order]:
        return await self._select("WHERE status = ?", (status,))

    async def list_between(self, start_iso: str, end_iso: str) -> list[Order]:
        return await self._select(
            "WHERE created_at >= ? AND created_at <= ?", (start_iso, end_iso),
        )

    async def list_containing_meals(
        self, meal_ids: list[int], status: Optional[str] = None,
    ) -> list[Order]:
        """Orders with at least one line referencing any of *meal_ids*."""
        if not meal_ids:
            return []
        placeholders = ", ".join("?" for _ in meal_ids)
        where = (
            "WHERE EXISTS (SELECT 1 FROM json_each(orders.items) AS line "
            f"WHERE json_extract(line.value, '$.meal_id') IN ({placeholders}))"
        )
        params: list = list(meal_ids)
        if status:
            where += " AND status = ?"
            params.append(status)
        return await self._select(where, params)

    async def update_status(self, order_id: int, status: str, expected_status: str) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                "UPDATE orders SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
                (status, utc_now(), order_id, expected_status),
            )
            return cursor.rowcount > 0

    async def delete(self, order_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute("DELETE FROM orders WHERE id = ?", (order_id,))
            return cursor.rowcount > 0

    async def delete_by_customer(self, customer_id: int) -> int:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                "DELETE FROM orders WHERE customer_id = ?", (customer_id,),
            )
            return cursor.rowcount

    async def total_sales(self) -> float:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall("SELECT SUM(total_amount) FROM orders")
            return rows[0][0] or 0

    async def monthly_sales(self) -> list[dict]:
        """Revenue and order count per calendar month ("YYYY-MM"), oldest first."""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                """SELECT substr(created_at, 1, 7) AS month,
                          SUM(total_amount) AS monthly_sales,
                          COUNT(*) AS order_count
                   FROM orders
                   GROUP BY month
                   ORDER BY month""",
            )
            return [
                {"month": r["month"], "monthly_sales": r["monthly_sales"], "order_count": r["order_count"]}
                for r in rows
            ]

    async def _select(self, where: str, params) -> list[Order]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT * FROM orders {where} {_ORDER_BY}", params,
            )
            return [self._row_to_entity(r) for r in rows]

    @staticmethod
    def _row_to_entity(row) -> Order:
        return Order(
            id=row["id"],
            customer_id=row["customer_id"],
            items=_load_items(row["items"]),
            total_amount=row["total_amount"],
            delivery_address=row["delivery_address"] or "",
            delivery_phone=row["delivery_phone"] or "",
            status=row["status"],
            payment_method=row["payment_method"] or "",
            payment_status=row["payment_status"],
            payment_id=row["payment_id"],
            notes=row["notes"],
            delivery_time=row["delivery_time"],
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )


def _dump_items(items: list[OrderItem]) -> str:
    return json.dumps([
        {"meal_id": i.meal_id, "quantity": i.quantity, "unit_price": i.unit_price}
        for i in items
    ])


def _load_items(raw: str) -> list[OrderItem]:
    return [
        OrderItem(meal_id=d["meal_id"], quantity=d["quantity"], unit_price=d["unit_price"])
        for d in json.loads(raw or "[]")
    ]
