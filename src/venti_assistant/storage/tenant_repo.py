"""Read-only, tenant-scoped queries over the store's relational data."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

import aiosqlite

from venti_assistant.storage.database import Database

LOW_STOCK_THRESHOLD = 10
EXCLUDED_SALES_STATUSES = ("cancelled", "refunded")


def _end_bound(end_date: str) -> tuple[str, str]:
    """Return (operator, value) so that a bare YYYY-MM-DD end date is inclusive."""
    if len(end_date) == 10:
        next_day = date.fromisoformat(end_date) + timedelta(days=1)
        return "<", next_day.isoformat()
    return "<=", end_date


def _rows(rows: list[aiosqlite.Row]) -> list[dict[str, Any]]:
    return [dict(row) for row in rows]


class TenantDataRepository:
    """Queries backing the assistant's tools.

    Every method takes the tenant id first and filters every table it reads by
    it. Nothing here writes.
    """

    def __init__(self, db: Database):
        self._db = db

    async def sales_orders(
        self,
        tenant_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Orders counting towards sales (not cancelled or refunded)."""
        sql = (
            "SELECT o.total_amount, o.created_at FROM orders o "
            "WHERE o.tenant_id = ? AND o.status NOT IN (?, ?)"
        )
        params: list[Any] = [tenant_id, *EXCLUDED_SALES_STATUSES]
        if start_date:
            sql += " AND o.created_at >= ?"
            params.append(start_date)
        if end_date:
            op, value = _end_bound(end_date)
            sql += f" AND o.created_at {op} ?"
            params.append(value)
        if category:
            sql += """ AND EXISTS (
                SELECT 1 FROM order_items i
                JOIN products p ON p.id = i.product_id AND p.tenant_id = o.tenant_id
                JOIN categories c ON c.id = p.category_id AND c.tenant_id = o.tenant_id
                WHERE i.order_id = o.id AND i.tenant_id = o.tenant_id
                  AND lower(c.name) = lower(?)
            )"""
            params.append(category)
        cursor = await self._db.conn.execute(sql, params)
        return _rows(await cursor.fetchall())

    async def list_orders(
        self,
        tenant_id: str,
        status: Optional[str] = None,
        customer_name: Optional[str] = None,
        start_date: Optional[str] = None,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        sql = (
            "SELECT order_number, status, total_amount, customer_first_name, "
            "customer_last_name, created_at FROM orders WHERE tenant_id = ?"
        )
        params: list[Any] = [tenant_id]
        if status:
            sql += " AND status = ?"
            params.append(status)
        if customer_name:
            sql += " AND (customer_first_name LIKE ? OR customer_last_name LIKE ?)"
            pattern = f"%{customer_name}%"
            params.extend([pattern, pattern])
        if start_date:
            sql += " AND created_at >= ?"
            params.append(start_date)
        sql += " ORDER BY created_at DESC LIMIT ?"
        params.append(limit)
        cursor = await self._db.conn.execute(sql, params)
        return _rows(await cursor.fetchall())

    async def get_order(self, tenant_id: str, order_number: str) -> Optional[dict[str, Any]]:
        """Full order with its line items, or None when not found for this tenant."""
        cursor = await self._db.conn.execute(
            "SELECT * FROM orders WHERE tenant_id = ? AND order_number = ?",
            (tenant_id, order_number),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        order = dict(row)
        cursor = await self._db.conn.execute(
            """SELECT product_id, product_name, quantity, unit_price, total_price
               FROM order_items WHERE tenant_id = ? AND order_id = ?""",
            (tenant_id, order["id"]),
        )
        order["items"] = _rows(await cursor.fetchall())
        return order

    async def list_products(
        self,
        tenant_id: str,
        search: Optional[str] = None,
        low_stock: bool = False,
    ) -> list[dict[str, Any]]:
        sql = (
            "SELECT name, sku, price, stock_quantity, status FROM products "
            "WHERE tenant_id = ? AND deleted_at IS NULL"
        )
        params: list[Any] = [tenant_id]
        if search:
            sql += " AND name LIKE ?"
            params.append(f"%{search}%")
        if low_stock:
            sql += " AND stock_quantity < ?"
            params.append(LOW_STOCK_THRESHOLD)
        sql += " ORDER BY name"
        cursor = await self._db.conn.execute(sql, params)
        return _rows(await cursor.fetchall())

    async def inventory_alerts(
        self, tenant_id: str, only_out_of_stock: bool = False
    ) -> list[dict[str, Any]]:
        sql = "SELECT name, sku, stock_quantity FROM products WHERE tenant_id = ? AND deleted_at IS NULL"
        if only_out_of_stock:
            sql += " AND stock_quantity = 0"
            params: list[Any] = [tenant_id]
        else:
            sql += " AND stock_quantity < ?"
            params = [tenant_id, LOW_STOCK_THRESHOLD]
        sql += " ORDER BY stock_quantity, name"
        cursor = await self._db.conn.execute(sql, params)
        return _rows(await cursor.fetchall())

    async def active_discounts(self, tenant_id: str) -> list[dict[str, Any]]:
        cursor = await self._db.conn.execute(
            """SELECT code, type, value, status, usage_count, usage_limit, starts_at, ends_at
               FROM discounts WHERE tenant_id = ? AND status = 'active'
               ORDER BY code""",
            (tenant_id,),
        )
        return _rows(await cursor.fetchall())
