"""
Task Manager API - Task Router

CRUD endpoints for task management.
All endpoints require a bearer token and are scoped to its user.
"""

from typing import Optional, List, Annotated, Literal

from fastapi import APIRouter, status, Depends, Query

from task_manager.users.dependencies import CurrentUser
from task_manager.tasks.dependencies import get_task_service
from task_manager.tasks.service import TaskService
from task_manager.tasks.schemas import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
)


# Largest limit or skip passed through to the database driver
MAX_PAGE_VALUE = 2**31 - 1

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
)
async def create_task(
    request: TaskCreateRequest,
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Create a new task for the authenticated user.

    The owner always comes from the token, never from the request body.
    """
    return await service.create_task(owner_id=current_user.id, request=request)


@router.get(
    "",
    response_model=List[TaskResponse],
    summary="List tasks",
)
async def list_tasks(
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
    completed: Optional[Literal["true", "false"]] = Query(
        default=None,
        description="Only tasks with this completion flag",
    ),
    sort_by: Optional[str] = Query(
        default=None,
        alias="sortBy",
        description="field:direction, field in description/completed/createdAt/updatedAt",
    ),
    limit: Optional[int] = Query(
        default=None, ge=0, le=MAX_PAGE_VALUE, description="Maximum number of tasks"
    ),
    skip: Optional[int] = Query(
        default=None, ge=0, le=MAX_PAGE_VALUE, description="Number of tasks to skip"
    ),
) -> List[TaskResponse]:
    """
    GET /tasks?completed=true
    GET /tasks?limit=10&skip=20
    GET /tasks?sortBy=createdAt:desc

    Only the literal strings true and false filter on completion; anything
    else is a 400 rather than being read as a loose boolean.
    """
    return await service.list_tasks(
        owner_id=current_user.id,
        completed=None if completed is None else completed == "true",
        sort_by=sort_by,
        limit=limit,
        skip=skip,
    )


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task by ID",
)
async def get_task(
    task_id: str,
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Get a specific task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    return await service.get_task(task_id, current_user.id)


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
)
async def update_task(
    task_id: str,
    request: TaskUpdateRequest,
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Update a task by ID.

    Only description and completed may be sent; any other key is a 400.
    Returns 404 if the task doesn't exist or belongs to another user.
    """
    return await service.update_task(task_id, current_user.id, request)


@router.delete(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    current_user: CurrentUser,
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskResponse:
    """
    Delete a task by ID.

    Returns 404 if the task doesn't exist or belongs to another user.
    """
    return await service.delete_task(task_id, current_user.id)
