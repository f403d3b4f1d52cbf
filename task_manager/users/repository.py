"""
Task Manager API - User Repository

Users own their session tokens directly: login pushes onto the user's
``tokens`` array and logout pulls from it, so there is no global session table.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from task_manager.errors import ConflictError
from task_manager.users.models import User

logger = logging.getLogger(__name__)


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository.

    This interface allows swapping implementations (in-memory -> MongoDB).
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises ConflictError on a taken email."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    async def get_by_token(self, user_id: str, token: str) -> Optional[User]:
        """Get user only if the token is still in its active list."""
        pass

    @abstractmethod
    async def add_token(self, user_id: str, token: str) -> None:
        pass

    @abstractmethod
    async def remove_token(self, user_id: str, token: str) -> None:
        pass

    @abstractmethod
    async def clear_tokens(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def update(self, user_id: str, updates: dict) -> Optional[User]:
        """Apply field updates. Raises ConflictError on a taken email."""
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> bool:
        pass


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of the user repository."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, user: User) -> User:
        try:
            await self.collection.insert_one(user.to_dict())
        except DuplicateKeyError:
            raise ConflictError("Email is already registered")
        logger.info("Created user id=%s", user.id)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def get_by_email(self, email: str) -> Optional[User]:
        doc = await self.collection.find_one({"email": email})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def exists_by_email(self, email: str) -> bool:
        return await self.collection.count_documents({"email": email}, limit=1) > 0

    async def get_by_token(self, user_id: str, token: str) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id, "tokens": token})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def add_token(self, user_id: str, token: str) -> None:
        await self.collection.update_one({"_id": user_id}, {"$push": {"tokens": token}})

    async def remove_token(self, user_id: str, token: str) -> None:
        await self.collection.update_one({"_id": user_id}, {"$pull": {"tokens": token}})

    async def clear_tokens(self, user_id: str) -> None:
        await self.collection.update_one({"_id": user_id}, {"$set": {"tokens": []}})

    async def update(self, user_id: str, updates: dict) -> Optional[User]:
        updates["updated_at"] = datetime.now(timezone.utc)
        try:
            result = await self.collection.find_one_and_update(
                {"_id": user_id},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError("Email is already registered")
        return User.from_dict(result) if result else None

    async def delete(self, user_id: str) -> bool:
        result = await self.collection.delete_one({"_id": user_id})
        return result.deleted_count > 0


class InMemoryUserRepository(UserRepositoryInterface):
    """In-memory user repository for testing."""

    def __init__(self):
        self._users: dict[str, User] = {}

    def clear(self) -> None:
        self._users.clear()

    def _find_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def create(self, user: User) -> User:
        if self._find_email(user.email) is not None:
            raise ConflictError("Email is already registered")
        self._users[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return self._find_email(email)

    async def exists_by_email(self, email: str) -> bool:
        return self._find_email(email) is not None

    async def get_by_token(self, user_id: str, token: str) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None or token not in user.tokens:
            return None
        return user

    async def add_token(self, user_id: str, token: str) -> None:
        user = self._users.get(user_id)
        if user is not None:
            user.tokens.append(token)

    async def remove_token(self, user_id: str, token: str) -> None:
        user = self._users.get(user_id)
        if user is not None:
            user.tokens = [t for t in user.tokens if t != token]

    async def clear_tokens(self, user_id: str) -> None:
        user = self._users.get(user_id)
        if user is not None:
            user.tokens = []

    async def update(self, user_id: str, updates: dict) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None

        email = updates.get("email")
        if email is not None:
            other = self._find_email(email)
            if other is not None and other.id != user_id:
                raise ConflictError("Email is already registered")

        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        return user

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None
