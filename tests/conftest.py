import os
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.setdefault("API_PREFIX", "/api")

from todo_api.exceptions import RepositoryError  # noqa: E402
from todo_api.main import app  # noqa: E402
from todo_api.models import Todo  # noqa: E402
from todo_api.repositories import InMemoryRepository, Repository, WriteResult  # noqa: E402
from todo_api.routers.todos import get_todo_service  # noqa: E402
from todo_api.services import TodoService  # noqa: E402

BASE_TIME = datetime(2025, 1, 25, 10, 0, 0, tzinfo=timezone.utc)


def make_todo(title: str = "Test Task", minutes: int = 0, is_completed: bool = False) -> Todo:
    """Build a persisted-looking Todo created ``minutes`` after BASE_TIME."""
    return Todo.restore(
        id=Todo.create(title).id,
        title=title,
        is_completed=is_completed,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class RecordingRepository(Repository):
    """In-memory repository that records the name of every call it receives."""

    def __init__(self) -> None:
        super().__init__()
        self.inner = InMemoryRepository()
        self.calls: List[str] = []

    async def find_all(self) -> List[Todo]:
        self.calls.append("find_all")
        return await self.inner.find_all()

    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        self.calls.append("find_by_id")
        return await self.inner.find_by_id(todo_id)

    async def insert(self, todo: Todo) -> UUID:
        self.calls.append("insert")
        return await self.inner.insert(todo)

    async def update(self, todo: Todo) -> WriteResult:
        self.calls.append("update")
        return await self.inner.update(todo)

    async def delete(self, todo_id: UUID) -> WriteResult:
        self.calls.append("delete")
        return await self.inner.delete(todo_id)

    @property
    def writes(self) -> List[str]:
        return [c for c in self.calls if c in ("insert", "update", "delete")]


class FailingRepository(Repository):
    """Repository whose backend is always down."""

    def _boom(self, operation: str):
        raise RepositoryError("connection refused", operation)

    async def find_all(self) -> List[Todo]:
        self._boom("find_all")

    async def find_by_id(self, todo_id: UUID) -> Optional[Todo]:
        self._boom("find_by_id")

    async def insert(self, todo: Todo) -> UUID:
        self._boom("insert")

    async def update(self, todo: Todo) -> WriteResult:
        self._boom("update")

    async def delete(self, todo_id: UUID) -> WriteResult:
        self._boom("delete")


@pytest.fixture
def repository():
    """Fresh in-memory repository for each test."""
    return RecordingRepository()


@pytest.fixture
def service(repository):
    return TodoService(repository)


@pytest.fixture
def client(repository):
    """Test client whose todo routes use the per-test repository."""
    app.dependency_overrides[get_todo_service] = lambda: TodoService(repository)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_todo_service] = lambda: TodoService(FailingRepository())
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
