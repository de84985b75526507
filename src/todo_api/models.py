from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, TypedDict
from uuid import UUID, uuid4

from .exceptions import TodoValidationError

TITLE_REQUIRED = "Todo title is required"


def _require_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise TodoValidationError(TITLE_REQUIRED)
    return value


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    Flat storage representation of a Todo shared by the storage adapters.

    Fields:
    - id: Unique identifier
    - title: Non-blank title
    - is_completed: Completion flag
    - created_at: Aware UTC creation timestamp
    - user_id: Optional owner identifier
    """

    id: UUID
    title: str
    is_completed: bool
    created_at: datetime
    user_id: Optional[UUID]


# PUBLIC_INTERFACE
class Todo:
    """
    Todo entity.

    Instances are built with ``Todo.create`` (new items) or ``Todo.restore``
    (items loaded from storage). ``id`` and ``created_at`` are read-only, and the
    title can only change through ``change_title``, which keeps it non-blank.
    """

    __slots__ = ("_id", "_title", "_is_completed", "_created_at", "_user_id")

    def __init__(
        self,
        id: UUID,
        title: str,
        is_completed: bool,
        created_at: datetime,
        user_id: Optional[UUID] = None,
    ) -> None:
        self._id = id
        self._title = _require_title(title)
        self._is_completed = bool(is_completed)
        self._created_at = created_at
        self._user_id = user_id

    @classmethod
    def create(cls, title: str, user_id: Optional[UUID] = None) -> "Todo":
        """Create a new, incomplete Todo with a fresh id and the current UTC time."""
        return cls(
            id=uuid4(),
            title=title,
            is_completed=False,
            created_at=datetime.now(timezone.utc),
            user_id=user_id,
        )

    @classmethod
    def restore(
        cls,
        id: UUID,
        title: str,
        is_completed: bool,
        created_at: datetime,
        user_id: Optional[UUID] = None,
    ) -> "Todo":
        """
        Rebuild a persisted Todo from all of its stored fields.

        Nothing is generated here; the title is still checked so a corrupt row
        cannot produce an invalid entity.
        """
        return cls(id, title, is_completed, created_at, user_id)

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def is_completed(self) -> bool:
        return self._is_completed

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def user_id(self) -> Optional[UUID]:
        return self._user_id

    def change_title(self, new_title: str) -> None:
        self._title = _require_title(new_title)

    def mark_completed(self) -> None:
        self._is_completed = True

    def mark_incomplete(self) -> None:
        self._is_completed = False

    def toggle_completion(self) -> None:
        self._is_completed = not self._is_completed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Todo):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Todo(id={self._id!s}, title={self._title!r}, "
            f"is_completed={self._is_completed}, created_at={self._created_at.isoformat()})"
        )
