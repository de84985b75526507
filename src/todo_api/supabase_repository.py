"""
Supabase storage adapter.

Persists todos in a hosted Postgres table through the supabase-py async
client. Expected table layout::

    create table todos (
        id uuid primary key default gen_random_uuid(),
        title text not null,
        is_completed boolean not null default false,
        created_at timestamptz not null default now(),
        user_id uuid null
    );
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from .exceptions import RepositoryError, TodoValidationError
from .logging_config import get_logger
from .models import Todo, TodoRecord
from .repositories import IdGeneration, Repository, WriteResult, from_record, to_record
from .settings import Settings

_BACKEND_ERRORS = (APIError, httpx.HTTPError)
_ROW_ERRORS = (KeyError, TypeError, ValueError, TodoValidationError)


class SupabaseRepository(Repository):
    """
    Repository backed by a Supabase (PostgREST) table.

    Not-found on update/delete is detected from an empty set of returned rows.
    PostgREST and transport errors, and rows that cannot be mapped back to a
    Todo, are logged and re-raised as RepositoryError.
    """

    def __init__(
        self,
        client: AsyncClient,
        table: str = "todos",
        id_generation: IdGeneration = IdGeneration.CORE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(id_generation)
        self.client = client
        self.table = table
        self.logger = logger or get_logger(__name__)

    def _query(self):
        return self.client.table(self.table)

    def _fail(self, operation: str, error: Exception, todo_id: Optional[UUID] = None) -> RepositoryError:
        self.logger.error(
            f"Supabase {operation} failed: {error}",
            extra={
                "operation": operation,
                "table": self.table,
                "todo_id": str(todo_id) if todo_id else None,
            },
        )
        return RepositoryError(f"Supabase {operation} failed: {error}", operation)

    @staticmethod
    def _row_to_entity(row: Dict[str, Any]) -> Todo:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        record: TodoRecord = {
            "id": UUID(str(row["id"])),
            "title": row["title"],
            "is_completed": bool(row["is_completed"]),
            "created_at": created_at,
            "user_id": UUID(str(row["user_id"])) if row.get("user_id") else None,
        }
        return from_record(record)

    def _map_rows(self, operation: str, rows: List[Dict[str, Any]], todo_id: Optional[UUID] = None) -> List[Todo]:
        try:
            return [self._row_to_entity(row) for row in rows]
        except _ROW_ERRORS as e:
            raise self._fail(operation, e, todo_id) from e

    @staticmethod
    def _entity_to_row(todo: Todo, include_id: bool = True) -> Dict[str, Any]:
        record = to_record(todo)
        row: Dict[str, Any] = {
            "title": record["title"],
            "is_completed": record["is_completed"],
            "created_at": record["created_at"].isoformat(),
            "user_id": str(record["user_id"]) if record["user_id"] else None,
        }
        if include_id:
            row["id"] = str(record["id"])
        return row

    async def find_all(self) -> List[Todo]:
        try:
            response = await self._query().select("*").order("created_at", desc=True).execute()
        except _BACKEND_ERRORS as e:
            raise self._fail("find_all", e) from e
        rows = response.data or []
        self.logger.debug(f"Fetched {len(rows)} todos", extra={"operation": "find_all", "table": self.table})
        return self._map_rows("find_all", rows)

    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        try:
            response = await self._query().select("*").eq("id", str(todo_id)).limit(1).execute()
        except _BACKEND_ERRORS as e:
            raise self._fail("find_by_id", e, todo_id) from e
        rows = response.data or []
        if not rows:
            self.logger.debug(
                f"Todo {todo_id} not found",
                extra={"operation": "find_by_id", "table": self.table, "todo_id": str(todo_id)},
            )
            return None
        return self._map_rows("find_by_id", rows[:1], todo_id)[0]

    async def insert(self, todo: Todo) -> UUID:
        # With backend ids the column default (gen_random_uuid) assigns the key
        include_id = self.id_generation is IdGeneration.CORE
        try:
            response = await self._query().insert(self._entity_to_row(todo, include_id=include_id)).execute()
        except _BACKEND_ERRORS as e:
            raise self._fail("insert", e, todo.id) from e
        rows = response.data or []
        if not rows or not rows[0].get("id"):
            raise self._fail("insert", ValueError("insert succeeded but no id was returned"), todo.id)
        try:
            return UUID(str(rows[0]["id"]))
        except ValueError as e:
            raise self._fail("insert", e, todo.id) from e

    async def update(self, todo: Todo) -> WriteResult:
        row = self._entity_to_row(todo, include_id=False)
        # created_at is fixed at creation
        row.pop("created_at")
        try:
            response = await self._query().update(row).eq("id", str(todo.id)).execute()
        except _BACKEND_ERRORS as e:
            raise self._fail("update", e, todo.id) from e
        return WriteResult.SUCCESS if response.data else WriteResult.NOT_FOUND

    async def delete(self, todo_id: UUID) -> WriteResult:
        try:
            response = await self._query().delete().eq("id", str(todo_id)).execute()
        except _BACKEND_ERRORS as e:
            raise self._fail("delete", e, todo_id) from e
        return WriteResult.SUCCESS if response.data else WriteResult.NOT_FOUND


# PUBLIC_INTERFACE
async def create_supabase_repository(settings: Settings) -> SupabaseRepository:
    """
    Create the Supabase client from settings and wrap it in a repository.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_KEY is not set
    """
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError("Supabase not configured. Set SUPABASE_URL and SUPABASE_KEY")

    logger = get_logger(__name__)
    logger.info("Initializing Supabase client...")
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client initialized successfully")
    return SupabaseRepository(
        client,
        table=settings.supabase_table,
        id_generation=IdGeneration(settings.id_generation),
        logger=logger,
    )
