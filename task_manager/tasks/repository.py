"""
Task Manager API - Task Repository

Repository pattern for task data access.
Includes MongoDB implementation for runtime and an in-memory one for testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, List, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from task_manager.tasks.models import Task

# (field, direction) pairs, direction 1 ascending / -1 descending
SortSpec = List[Tuple[str, int]]


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for task repository.

    All operations are scoped by owner_id: a task owned by someone else
    behaves exactly like a task that does not exist.
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def list_by_owner(
        self,
        owner_id: str,
        completed: Optional[bool] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Task]:
        """List tasks for owner with optional filter, ordering and paging."""
        pass

    @abstractmethod
    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        pass

    @abstractmethod
    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        """Delete a task. Returns the removed task, or None if not found."""
        pass

    @abstractmethod
    async def delete_by_owner(self, owner_id: str) -> int:
        """Delete every task of an owner. Returns how many were removed."""
        pass


class TaskRepository(TaskRepositoryInterface):
    """
    MongoDB implementation of the task repository.

    Every query carries the owner_id filter.
    """

    COLLECTION_NAME = "tasks"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, task: Task) -> Task:
        await self.collection.insert_one(task.to_dict())
        return task

    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        doc = await self.collection.find_one({"_id": task_id, "owner_id": owner_id})
        if doc is None:
            return None
        return Task.from_dict(doc)

    async def list_by_owner(
        self,
        owner_id: str,
        completed: Optional[bool] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Task]:
        query: dict = {"owner_id": owner_id}
        if completed is not None:
            query["completed"] = completed

        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)

        tasks: List[Task] = []
        async for doc in cursor:
            tasks.append(Task.from_dict(doc))
        return tasks

    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        updates["updated_at"] = datetime.now(timezone.utc)

        result = await self.collection.find_one_and_update(
            {"_id": task_id, "owner_id": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if result is None:
            return None
        return Task.from_dict(result)

    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        result = await self.collection.find_one_and_delete({"_id": task_id, "owner_id": owner_id})
        if result is None:
            return None
        return Task.from_dict(result)

    async def delete_by_owner(self, owner_id: str) -> int:
        result = await self.collection.delete_many({"owner_id": owner_id})
        return result.deleted_count


class InMemoryTaskRepository(TaskRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}

    def clear(self) -> None:
        self._tasks.clear()

    def _owned(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return None
        return task

    async def create(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        return self._owned(task_id, owner_id)

    async def list_by_owner(
        self,
        owner_id: str,
        completed: Optional[bool] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Task]:
        results = [
            task
            for task in self._tasks.values()
            if task.owner_id == owner_id and (completed is None or task.completed is completed)
        ]

        # Stable sorts applied last-key-first give a multi-key ordering
        for field_name, direction in reversed(sort or []):
            results.sort(key=lambda t: getattr(t, field_name), reverse=direction < 0)

        results = results[skip:]
        if limit:
            results = results[:limit]
        return results

    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        task = self._owned(task_id, owner_id)
        if task is None:
            return None

        for key, value in updates.items():
            if hasattr(task, key):
                setattr(task, key, value)

        task.updated_at = datetime.now(timezone.utc)
        return task

    async def delete(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._owned(task_id, owner_id)
        if task is None:
            return None
        del self._tasks[task_id]
        return task

    async def delete_by_owner(self, owner_id: str) -> int:
        owned = [task_id for task_id, task in self._tasks.items() if task.owner_id == owner_id]
        for task_id in owned:
            del self._tasks[task_id]
        return len(owned)

    async def count_by_owner(self, owner_id: str) -> int:
        return sum(1 for t in self._tasks.values() if t.owner_id == owner_id)
