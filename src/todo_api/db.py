from __future__ import annotations

import asyncio
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generator, List, Optional
from uuid import UUID

from .exceptions import RepositoryError, TodoValidationError
from .logging_config import get_logger
from .models import Todo, TodoRecord
from .repositories import IdGeneration, Repository, WriteResult, from_record, to_record

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    is_completed: str = "is_completed"
    created_at: str = "created_at"
    user_id: str = "user_id"
    seq: str = "seq"


_COLS = _Cols()


def _to_utc_text(value: datetime) -> str:
    # Fixed-width UTC text keeps ORDER BY created_at chronological
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Each call opens its own connection in a worker thread so the event loop is
    never blocked on disk I/O. The constructor creates the schema synchronously;
    async callers build it with ``asyncio.to_thread``.
    """

    def __init__(self, db_path: str, id_generation: IdGeneration = IdGeneration.CORE) -> None:
        super().__init__(id_generation)
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._run("init", self._init_db)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _run(self, operation: str, fn, *args):
        try:
            return fn(*args)
        except sqlite3.Error as e:
            logger.error(
                f"SQLite {operation} failed: {e}",
                extra={"operation": operation, "table": _COLS.table},
            )
            raise RepositoryError(f"SQLite {operation} failed: {e}", operation) from e
        except (ValueError, TypeError, TodoValidationError) as e:
            logger.error(
                f"SQLite {operation} returned an unreadable row: {e}",
                extra={"operation": operation, "table": _COLS.table},
            )
            raise RepositoryError(f"SQLite {operation} returned an unreadable row: {e}", operation) from e

    async def _run_async(self, operation: str, fn, *args):
        return await asyncio.to_thread(self._run, operation, fn, *args)

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.seq} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.id} TEXT NOT NULL UNIQUE,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.is_completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.user_id} TEXT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> Todo:
        user_id = row[_COLS.user_id]
        record: TodoRecord = {
            "id": UUID(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "is_completed": bool(row[_COLS.is_completed]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "user_id": UUID(user_id) if user_id else None,
        }
        return from_record(record)

    def _select_all(self) -> List[Todo]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.created_at} DESC, {_COLS.seq} DESC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def _select_one(self, todo_id: UUID) -> Optional[Todo]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (str(todo_id),)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def _insert(self, record: TodoRecord) -> UUID:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.is_completed},
                    {_COLS.created_at}, {_COLS.user_id})
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    str(record["id"]),
                    record["title"],
                    1 if record["is_completed"] else 0,
                    _to_utc_text(record["created_at"]),
                    str(record["user_id"]) if record["user_id"] else None,
                ),
            )
        return record["id"]

    def _update(self, record: TodoRecord) -> WriteResult:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.is_completed} = ?, {_COLS.user_id} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    record["title"],
                    1 if record["is_completed"] else 0,
                    str(record["user_id"]) if record["user_id"] else None,
                    str(record["id"]),
                ),
            )
            return WriteResult.SUCCESS if cur.rowcount > 0 else WriteResult.NOT_FOUND

    def _delete(self, todo_id: UUID) -> WriteResult:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (str(todo_id),))
            return WriteResult.SUCCESS if cur.rowcount > 0 else WriteResult.NOT_FOUND

    async def find_all(self) -> List[Todo]:
        return await self._run_async("find_all", self._select_all)

    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        return await self._run_async("find_by_id", self._select_one, todo_id)

    async def insert(self, todo: Todo) -> UUID:
        record = to_record(todo)
        record["id"] = self._durable_id(todo)
        return await self._run_async("insert", self._insert, record)

    async def update(self, todo: Todo) -> WriteResult:
        return await self._run_async("update", self._update, to_record(todo))

    async def delete(self, todo_id: UUID) -> WriteResult:
        return await self._run_async("delete", self._delete, todo_id)
