"""
Application service for Todo use cases.

``TodoService`` is a stateless orchestrator: each use case validates its input,
loads or creates a ``Todo``, applies entity behavior and performs at most one
repository write. Repository errors are never caught here.
"""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from .exceptions import TodoValidationError
from .logging_config import get_logger
from .models import TITLE_REQUIRED, Todo
from .repositories import Repository, WriteResult
from .schemas import TodoCreate, TodoUpdate, TodoView

logger = get_logger(__name__)


def to_view(todo: Todo) -> TodoView:
    """Map an entity to its read model."""
    return TodoView(
        id=todo.id,
        title=todo.title,
        is_completed=todo.is_completed,
        created_at=todo.created_at,
    )


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


# PUBLIC_INTERFACE
class TodoService:
    """Use cases for listing, reading, creating, updating, deleting and toggling todos."""

    def __init__(self, repository: Repository):
        if repository is None:
            raise ValueError("repository is required")
        self.repository = repository

    async def list_todos(self) -> List[TodoView]:
        """Return all todos in repository order (newest first)."""
        todos = await self.repository.find_all()
        return [to_view(todo) for todo in todos]

    async def get_todo(self, todo_id: UUID) -> Optional[TodoView]:
        """Return one todo, or None if it does not exist."""
        todo = await self.repository.find_by_id(todo_id)
        if todo is None:
            return None
        return to_view(todo)

    async def create_todo(self, request: TodoCreate) -> UUID:
        """
        Create a todo and return its durable id.

        Raises:
            TodoValidationError: If the title is blank. Nothing is persisted.
        """
        if _is_blank(request.title):
            raise TodoValidationError(TITLE_REQUIRED)

        todo = Todo.create(request.title)
        todo_id = await self.repository.insert(todo)
        logger.info(f"Created todo {todo_id}")
        return todo_id

    async def update_todo(self, todo_id: UUID, request: TodoUpdate) -> WriteResult:
        """
        Apply the fields present in ``request`` to an existing todo.

        Raises:
            TodoValidationError: If a title is present but blank.
        """
        title_present = "title" in request.model_fields_set and request.title is not None
        if title_present and _is_blank(request.title):
            raise TodoValidationError(TITLE_REQUIRED)

        todo = await self.repository.find_by_id(todo_id)
        if todo is None:
            logger.debug(f"Update skipped, todo {todo_id} not found")
            return WriteResult.NOT_FOUND

        if title_present:
            todo.change_title(request.title)
        if request.is_completed is not None:
            if request.is_completed:
                todo.mark_completed()
            else:
                todo.mark_incomplete()

        return await self.repository.update(todo)

    async def delete_todo(self, todo_id: UUID) -> WriteResult:
        result = await self.repository.delete(todo_id)
        if result:
            logger.info(f"Deleted todo {todo_id}")
        return result

    async def toggle_todo(self, todo_id: UUID) -> WriteResult:
        """Flip the completion flag of an existing todo."""
        todo = await self.repository.find_by_id(todo_id)
        if todo is None:
            logger.debug(f"Toggle skipped, todo {todo_id} not found")
            return WriteResult.NOT_FOUND

        todo.toggle_completion()
        return await self.repository.update(todo)
