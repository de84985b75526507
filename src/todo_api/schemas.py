from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    The title is only required to be a string here; blank titles are rejected
    by the application service with a TodoValidationError.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
            }
        }
    )

    title: str = Field(..., description="Title of the todo item; must not be blank")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Buy oat milk",
                "isCompleted": True,
            }
        },
    )

    title: Optional[str] = Field(default=None, description="New title; must not be blank when present")
    is_completed: Optional[bool] = Field(
        default=None,
        alias="isCompleted",
        description="New completion status; omit to leave unchanged",
    )


# PUBLIC_INTERFACE
class TodoView(BaseModel):
    """
    Read model returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f2b8c1e-4d7a-4b9e-9a0c-2f6d1e8b7c55",
                "title": "Buy milk",
                "isCompleted": False,
                "createdAt": "2025-01-25T10:15:30.123456Z",
            }
        },
    )

    id: UUID = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    is_completed: bool = Field(..., alias="isCompleted", description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (ISO8601)")
