from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.database import get_database
from task_manager.emails.notifications import NotificationDispatcher, get_notifier
from task_manager.users.models import Session, User
from task_manager.users.repository import MongoUserRepository, UserRepositoryInterface
from task_manager.users.service import AuthService


# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


async def get_user_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> UserRepositoryInterface:
    """Dependency to get user repository instance."""
    return MongoUserRepository(db)


async def get_auth_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(repository, notifier)


async def get_current_session(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Session:
    """Resolve the Authorization header. Raises AuthError (401) on any failure."""
    token = credentials.credentials if credentials is not None else None
    return await auth_service.authenticate(token)


async def get_current_user(
    session: Annotated[Session, Depends(get_current_session)],
) -> User:
    return session.user


# Type aliases for cleaner dependency injection
CurrentSession = Annotated[Session, Depends(get_current_session)]
CurrentUser = Annotated[User, Depends(get_current_user)]
