"""SQLite database connection manager with schema migration."""

from __future__ import annotations

from pathlib import Path

import aiosqlite

from venti_assistant.log import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    id              TEXT PRIMARY KEY,
    tenant_id       TEXT NOT NULL,
    name            TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id              TEXT PRIMARY KEY,
    tenant_id       TEXT    NOT NULL,
    category_id     TEXT REFERENCES categories(id),
    name            TEXT    NOT NULL,
    sku             TEXT,
    price           REAL    NOT NULL DEFAULT 0,
    stock_quantity  INTEGER NOT NULL DEFAULT 0,
    status          TEXT    NOT NULL DEFAULT 'active',
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f','now')),
    deleted_at      TEXT
);

CREATE INDEX IF NOT EXISTS idx_products_tenant
    ON products(tenant_id, stock_quantity);

CREATE TABLE IF NOT EXISTS orders (
    id                  TEXT PRIMARY KEY,
    tenant_id           TEXT NOT NULL,
    order_number        TEXT NOT NULL,
    status              TEXT NOT NULL DEFAULT 'pending',
    payment_status      TEXT NOT NULL DEFAULT 'pending',
    total_amount        REAL NOT NULL DEFAULT 0,
    customer_first_name TEXT,
    customer_last_name  TEXT,
    customer_email      TEXT,
    shipping_address    TEXT,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f','now')),
    UNIQUE (tenant_id, order_number)
);

CREATE INDEX IF NOT EXISTS idx_orders_tenant
    ON orders(tenant_id, created_at);

CREATE TABLE IF NOT EXISTS order_items (
    id              TEXT PRIMARY KEY,
    tenant_id       TEXT    NOT NULL,
    order_id        TEXT    NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
    product_id      TEXT REFERENCES products(id),
    product_name    TEXT    NOT NULL,
    quantity        INTEGER NOT NULL DEFAULT 1,
    unit_price      REAL    NOT NULL DEFAULT 0,
    total_price     REAL    NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS discounts (
    id              TEXT PRIMARY KEY,
    tenant_id       TEXT    NOT NULL,
    code            TEXT    NOT NULL,
    type            TEXT    NOT NULL DEFAULT 'percentage',
    value           REAL    NOT NULL DEFAULT 0,
    status          TEXT    NOT NULL DEFAULT 'active',
    usage_count     INTEGER NOT NULL DEFAULT 0,
    usage_limit     INTEGER,
    starts_at       TEXT,
    ends_at         TEXT
);

CREATE TABLE IF NOT EXISTS kv_store (
    key             TEXT PRIMARY KEY,
    value           TEXT NOT NULL,
    updated_at      TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f','now'))
);
"""


class Database:
    """Async SQLite database manager."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Open connection and run migrations."""
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA foreign_keys=ON")
        await self._conn.executescript(SCHEMA_SQL)
        await self._conn.commit()
        logger.info("database_initialized", path=self._db_path)

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._conn

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("database_closed")
