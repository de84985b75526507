from __future__ import annotations

import asyncio
import enum
from abc import ABC, abstractmethod
from itertools import count
from threading import RLock
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from .logging_config import get_logger
from .models import Todo, TodoRecord
from .settings import Settings, get_settings

logger = get_logger(__name__)


# PUBLIC_INTERFACE
class WriteResult(enum.Enum):
    """
    Outcome of a repository write.

    Truthiness equals success, so ``if await repo.delete(todo_id):`` reads the
    same as a boolean while callers can still tell NOT_FOUND apart.
    Backend failures are not a WriteResult; they raise RepositoryError.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return self is WriteResult.SUCCESS


# PUBLIC_INTERFACE
class IdGeneration(str, enum.Enum):
    """Who assigns the durable identifier of an inserted Todo."""

    CORE = "core"
    BACKEND = "backend"


def to_record(todo: Todo) -> TodoRecord:
    """Flatten an entity into its storage row."""
    return {
        "id": todo.id,
        "title": todo.title,
        "is_completed": todo.is_completed,
        "created_at": todo.created_at,
        "user_id": todo.user_id,
    }


def from_record(record: TodoRecord) -> Todo:
    """Rebuild an entity from its storage row."""
    return Todo.restore(
        id=record["id"],
        title=record["title"],
        is_completed=record["is_completed"],
        created_at=record["created_at"],
        user_id=record["user_id"],
    )


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    "Not found" is reported as ``None`` (reads) or ``WriteResult.NOT_FOUND``
    (writes). Genuine backend failures raise ``RepositoryError``.
    """

    def __init__(self, id_generation: IdGeneration = IdGeneration.CORE) -> None:
        self.id_generation = IdGeneration(id_generation)

    def _durable_id(self, todo: Todo) -> UUID:
        """Id to persist for a new Todo under the configured policy."""
        if self.id_generation is IdGeneration.BACKEND:
            return uuid4()
        return todo.id

    @abstractmethod
    async def find_all(self) -> List[Todo]:
        """Return every Todo, most recently created first. Empty list when there are none."""

    @abstractmethod
    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        """Return a Todo by id, or None if not found."""

    @abstractmethod
    async def insert(self, todo: Todo) -> UUID:
        """Persist a new Todo and return its durable id."""

    @abstractmethod
    async def update(self, todo: Todo) -> WriteResult:
        """Persist the mutable fields of an existing Todo."""

    @abstractmethod
    async def delete(self, todo_id: UUID) -> WriteResult:
        """Delete a Todo by id."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self, id_generation: IdGeneration = IdGeneration.CORE) -> None:
        super().__init__(id_generation)
        self._lock = RLock()
        self._items: Dict[UUID, Tuple[int, TodoRecord]] = {}
        self._sequence = count()

    async def find_all(self) -> List[Todo]:
        with self._lock:
            rows = list(self._items.values())
        # Insertion sequence breaks created_at ties so the newest insert still comes first
        rows.sort(key=lambda row: (row[1]["created_at"], row[0]), reverse=True)
        return [from_record(record) for _, record in rows]

    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        with self._lock:
            row = self._items.get(todo_id)
        return None if row is None else from_record(row[1])

    async def insert(self, todo: Todo) -> UUID:
        record = to_record(todo)
        record["id"] = self._durable_id(todo)
        with self._lock:
            self._items[record["id"]] = (next(self._sequence), record)
        return record["id"]

    async def update(self, todo: Todo) -> WriteResult:
        with self._lock:
            existing = self._items.get(todo.id)
            if existing is None:
                return WriteResult.NOT_FOUND
            sequence, stored = existing
            updated = stored.copy()
            updated["title"] = todo.title
            updated["is_completed"] = todo.is_completed
            updated["user_id"] = todo.user_id
            self._items[todo.id] = (sequence, updated)
        return WriteResult.SUCCESS

    async def delete(self, todo_id: UUID) -> WriteResult:
        with self._lock:
            removed = self._items.pop(todo_id, None)
        return WriteResult.NOT_FOUND if removed is None else WriteResult.SUCCESS


_repository: Optional[Repository] = None
_repository_lock = asyncio.Lock()


# PUBLIC_INTERFACE
async def build_repository(settings: Settings) -> Repository:
    """
    Construct the repository selected by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (stdlib sqlite3)
    - supabase: SupabaseRepository (hosted Postgres via supabase-py)
    """
    id_generation = IdGeneration(settings.id_generation)
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        # Schema creation is blocking disk I/O
        return await asyncio.to_thread(SQLiteRepository, settings.sqlite_db_path, id_generation=id_generation)
    if settings.persistence_backend == "supabase":
        from .supabase_repository import create_supabase_repository

        return await create_supabase_repository(settings)
    return InMemoryRepository(id_generation=id_generation)


# PUBLIC_INTERFACE
async def get_repository() -> Repository:
    """Return the process-wide repository, building it on first use."""
    global _repository
    if _repository is not None:
        return _repository
    # Concurrent first requests must share one client
    async with _repository_lock:
        if _repository is None:
            settings = get_settings()
            _repository = await build_repository(settings)
            logger.info(
                f"Repository initialized: backend={settings.persistence_backend}, "
                f"id_generation={settings.id_generation}"
            )
    return _repository


def reset_repository() -> None:
    """Drop the cached repository so the next call rebuilds it from settings."""
    global _repository, _repository_lock
    _repository = None
    _repository_lock = asyncio.Lock()
