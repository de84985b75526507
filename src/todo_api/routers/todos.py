from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ..repositories import Repository, get_repository
from ..schemas import TodoCreate, TodoUpdate, TodoView
from ..services import TodoService

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

NOT_FOUND = "Todo not found"


# PUBLIC_INTERFACE
async def get_todo_service(repo: Repository = Depends(get_repository)) -> TodoService:
    """
    Dependency providing a TodoService bound to the configured repository.
    Tests replace it through ``app.dependency_overrides``.
    """
    return TodoService(repo)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoView],
    summary="List Todos",
    description="List all todos, most recently created first.",
    responses={
        200: {"description": "List retrieved successfully"},
    },
)
async def list_todos(service: TodoService = Depends(get_todo_service)) -> List[TodoView]:
    """
    List every Todo item.
    """
    return await service.list_todos()


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoView,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
async def get_todo(todo_id: UUID, service: TodoService = Depends(get_todo_service)) -> TodoView:
    """
    Retrieve a single Todo item by its ID.
    """
    view = await service.get_todo(todo_id)
    if view is None:
        raise _not_found()
    return view


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoView,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item and return the created resource with its location.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
    },
)
async def create_todo(
    payload: TodoCreate,
    request: Request,
    response: Response,
    service: TodoService = Depends(get_todo_service),
) -> TodoView:
    """
    Create a new Todo.
    """
    todo_id = await service.create_todo(payload)
    view = await service.get_todo(todo_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Created todo could not be read back",
        )
    response.headers["Location"] = str(request.url_for("get_todo", todo_id=str(todo_id)))
    return view


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update Todo",
    description="Update the title and/or completion status of a Todo. Omitted fields are left unchanged.",
    responses={
        204: {"description": "Todo updated"},
        400: {"description": "Validation error"},
        404: {"description": "Todo not found"},
    },
)
async def update_todo(
    todo_id: UUID,
    payload: TodoUpdate,
    service: TodoService = Depends(get_todo_service),
) -> None:
    """
    Partial update of a Todo item.
    """
    if not await service.update_todo(todo_id, payload):
        raise _not_found()
    return None


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
async def delete_todo(todo_id: UUID, service: TodoService = Depends(get_todo_service)) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not await service.delete_todo(todo_id):
        raise _not_found()
    return None


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}/toggle",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Toggle Todo",
    description="Flip the completion status of a Todo item.",
    responses={
        204: {"description": "Todo toggled"},
        404: {"description": "Todo not found"},
    },
)
async def toggle_todo(todo_id: UUID, service: TodoService = Depends(get_todo_service)) -> None:
    """
    Toggle completion of a Todo.
    """
    if not await service.toggle_todo(todo_id):
        raise _not_found()
    return None
