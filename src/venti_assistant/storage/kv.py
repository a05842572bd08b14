"""Key-value storage capability used for best-effort conversation persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod

from venti_assistant.storage.database import Database


class KeyValueStorage(ABC):
    """Minimal string store. Implementations may raise on I/O failure."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...


class MemoryStorage(KeyValueStorage):
    """Process-local storage; contents are lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteStorage(KeyValueStorage):
    """Storage backed by the ``kv_store`` table. Last writer wins."""

    def __init__(self, db: Database):
        self._db = db

    async def get(self, key: str) -> str | None:
        cursor = await self._db.conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = await cursor.fetchone()
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        await self._db.conn.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key)
               DO UPDATE SET value = excluded.value,
                             updated_at = strftime('%Y-%m-%dT%H:%M:%f','now')""",
            (key, value),
        )
        await self._db.conn.commit()

    async def delete(self, key: str) -> None:
        await self._db.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await self._db.conn.commit()
