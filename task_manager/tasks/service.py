"""
Task Manager API - Task Service

Business logic for owner-scoped task operations.
"""

import logging
from typing import Optional, List

from task_manager.errors import NotFoundError
from task_manager.tasks.models import Task
from task_manager.tasks.repository import SortSpec, TaskRepositoryInterface
from task_manager.tasks.schemas import TaskCreateRequest, TaskUpdateRequest, TaskResponse

logger = logging.getLogger(__name__)

# Public sort key -> stored field
SORTABLE_FIELDS = {
    "description": "description",
    "completed": "completed",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def parse_sort(sort_by: Optional[str]) -> SortSpec:
    """
    Parse a ``field:direction`` sort expression.

    Direction ``desc`` sorts descending, anything else ascending. An
    unrecognized field yields no ordering rather than an error.
    """
    if not sort_by:
        return []

    field_name, _, direction = sort_by.partition(":")
    column = SORTABLE_FIELDS.get(field_name.strip())
    if column is None:
        return []

    return [(column, -1 if direction.strip().lower() == "desc" else 1)]


class TaskService:
    """Service layer for task business logic."""

    def __init__(self, repository: TaskRepositoryInterface):
        self.repository = repository

    @staticmethod
    def _task_to_response(task: Task) -> TaskResponse:
        return TaskResponse(
            id=task.id,
            owner_id=task.owner_id,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    async def create_task(self, owner_id: str, request: TaskCreateRequest) -> TaskResponse:
        """Create a new task for the owner."""
        task = Task.create(
            owner_id=owner_id,
            description=request.description,
            completed=request.completed,
        )
        await self.repository.create(task)
        return self._task_to_response(task)

    async def get_task(self, task_id: str, owner_id: str) -> TaskResponse:
        """Get a task by ID, scoped to owner."""
        task = await self.repository.get_by_id(task_id, owner_id)
        if task is None:
            raise NotFoundError("Task not found")
        return self._task_to_response(task)

    async def list_tasks(
        self,
        owner_id: str,
        completed: Optional[bool] = None,
        sort_by: Optional[str] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> List[TaskResponse]:
        """List tasks for owner with optional filter, sort and pagination."""
        tasks = await self.repository.list_by_owner(
            owner_id=owner_id,
            completed=completed,
            sort=parse_sort(sort_by),
            skip=skip or 0,
            limit=limit,
        )
        return [self._task_to_response(task) for task in tasks]

    async def update_task(
        self,
        task_id: str,
        owner_id: str,
        request: TaskUpdateRequest,
    ) -> TaskResponse:
        """Update a task, scoped to owner. Concurrent updates are last-write-wins."""
        updates = request.model_dump(exclude_unset=True)

        if not updates:
            return await self.get_task(task_id, owner_id)

        task = await self.repository.update(task_id, owner_id, updates)
        if task is None:
            raise NotFoundError("Task not found")
        return self._task_to_response(task)

    async def delete_task(self, task_id: str, owner_id: str) -> TaskResponse:
        """Delete a task, scoped to owner. Returns the removed task."""
        task = await self.repository.delete(task_id, owner_id)
        if task is None:
            raise NotFoundError("Task not found")
        return self._task_to_response(task)

    async def delete_all_for_owner(self, owner_id: str) -> int:
        """Remove every task of an owner. Only called when the account goes away."""
        removed = await self.repository.delete_by_owner(owner_id)
        logger.info("Removed %d tasks for owner %s", removed, owner_id)
        return removed
