"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the factory (and by the CLI init-db command).
"""

from __future__ import annotations

import logging

from messhub.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        role TEXT NOT NULL,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        created_at TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS customer_profiles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        account_id INTEGER NOT NULL UNIQUE,
        phone TEXT,
        address TEXT,
        is_completed INTEGER DEFAULT 0,
        created_at TEXT,
        updated_at TEXT,
        FOREIGN KEY (account_id) REFERENCES accounts(id) ON DELETE CASCADE
    )""",
    """CREATE TABLE IF NOT EXISTS owner_profiles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        account_id INTEGER NOT NULL UNIQUE,
        phone TEXT,
        address TEXT,
        is_completed INTEGER DEFAULT 0,
        created_at TEXT,
        updated_at TEXT,
        FOREIGN KEY (account_id) REFERENCES accounts(id) ON DELETE CASCADE
    )""",
    """CREATE TABLE IF NOT EXISTS messes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        owner_id INTEGER NOT NULL,
        name TEXT,
        area TEXT,
        phone TEXT,
        address TEXT,
        description TEXT,
        is_active INTEGER DEFAULT 1,
        created_at TEXT,
        updated_at TEXT,
        FOREIGN KEY (owner_id) REFERENCES accounts(id)
    )""",
    """CREATE TABLE IF NOT EXISTS meals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        mess_id INTEGER NOT NULL,
        name TEXT,
        meal_type TEXT,
        is_veg INTEGER,
        description TEXT,
        price REAL,
        is_available INTEGER DEFAULT 1,
        created_at TEXT,
        updated_at TEXT,
        FOREIGN KEY (mess_id) REFERENCES messes(id) ON DELETE CASCADE
    )""",
    # items is a JSON array of {meal_id, quantity, unit_price} snapshots;
    # customer and meal ids are weak references (no foreign keys).
    """CREATE TABLE IF NOT EXISTS orders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_id INTEGER NOT NULL,
        items TEXT NOT NULL,
        total_amount REAL NOT NULL,
        delivery_address TEXT,
        delivery_phone TEXT,
        status TEXT NOT NULL,
        payment_method TEXT,
        payment_status TEXT NOT NULL,
        payment_id TEXT,
        notes TEXT,
        delivery_time TEXT,
        created_at TEXT,
        updated_at TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS reviews (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_id INTEGER NOT NULL,
        mess_id INTEGER NOT NULL,
        rating INTEGER NOT NULL,
        comment TEXT,
        created_at TEXT,
        updated_at TEXT,
        FOREIGN KEY (mess_id) REFERENCES messes(id) ON DELETE CASCADE
    )""",
    """CREATE TABLE IF NOT EXISTS contact_messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        author_account_id INTEGER NOT NULL,
        name TEXT,
        email TEXT,
        message TEXT,
        created_at TEXT
    )""",
    "CREATE INDEX IF NOT EXISTS idx_meals_mess ON meals(mess_id)",
    "CREATE INDEX IF NOT EXISTS idx_orders_customer ON orders(customer_id)",
    "CREATE INDEX IF NOT EXISTS idx_reviews_mess ON reviews(mess_id)",
]


async def run_migrations(connection: AsyncSQLiteConnection) -> None:
    """Create all tables if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    async with connection.acquire() as conn:
        for ddl in _TABLES:
            await conn.execute(ddl)
    logger.info("All tables created (or already exist).")
