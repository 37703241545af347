"""SQLite-backed record repository."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from shared.dal.collections import get_collection
from shared.dal.record_repository import Record, RecordRepository
from shared.db.connection import utc_timestamp

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteRecordRepository(RecordRepository):
    """SQLite implementation of RecordRepository.

    Writes run under an asyncio lock so read-merge-write updates do not
    interleave inside one process. There is no version check: concurrent
    updates to the same record are last-write-wins.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def list_records(self, collection: str) -> list[Record]:
        table = _table(collection)
        rows = self._db.connection.execute(
            f"SELECT id, created_at, updated_at, data FROM {table} ORDER BY created_at DESC, rowid DESC",  # noqa: S608
        ).fetchall()
        return [_to_record(row) for row in rows]

    async def get_record(self, collection: str, record_id: str) -> Record | None:
        row = self._fetch(_table(collection), record_id)
        if row is None:
            return None
        return _to_record(row)

    async def create_record(self, collection: str, data: dict[str, Any]) -> Record:
        table = _table(collection)
        record_id = str(uuid4())
        now = utc_timestamp()
        async with self._lock:
            conn = self._db.connection
            conn.execute(
                f"INSERT INTO {table} (id, created_at, updated_at, data) VALUES (?, ?, ?, ?)",  # noqa: S608
                (record_id, now, now, json.dumps(data)),
            )
            conn.commit()
        return {"id": record_id, "created_at": now, "updated_at": now, **data}

    async def update_record(self, collection: str, record_id: str, data: dict[str, Any]) -> Record | None:
        table = _table(collection)
        async with self._lock:
            row = self._fetch(table, record_id)
            if row is None:
                return None
            merged = {**json.loads(row[3]), **data}
            now = utc_timestamp()
            conn = self._db.connection
            conn.execute(
                f"UPDATE {table} SET data = ?, updated_at = ? WHERE id = ?",  # noqa: S608
                (json.dumps(merged), now, record_id),
            )
            conn.commit()
        return {"id": record_id, "created_at": row[1], "updated_at": now, **merged}

    async def delete_record(self, collection: str, record_id: str) -> bool:
        table = _table(collection)
        async with self._lock:
            conn = self._db.connection
            cursor = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))  # noqa: S608
            conn.commit()
        return cursor.rowcount > 0

    def _fetch(self, table: str, record_id: str) -> tuple | None:
        return self._db.connection.execute(
            f"SELECT id, created_at, updated_at, data FROM {table} WHERE id = ?",  # noqa: S608
            (record_id,),
        ).fetchone()


def _table(collection: str) -> str:
    """Resolve a collection name to its table, refusing anything outside the registry."""
    return get_collection(collection).name


def _to_record(row: tuple) -> Record:
    record_id, created_at, updated_at, data = row
    return {**json.loads(data), "id": record_id, "created_at": created_at, "updated_at": updated_at}
