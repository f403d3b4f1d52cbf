"""
Task Manager API - Users Router

Signup, login/logout, profile and avatar endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from task_manager.config import settings
from task_manager.emails.notifications import NotificationDispatcher, get_notifier
from task_manager.tasks.dependencies import get_task_service
from task_manager.tasks.service import TaskService
from task_manager.users.avatar import AVATAR_MEDIA_TYPE
from task_manager.users.dependencies import (
    CurrentSession,
    CurrentUser,
    get_auth_service,
    get_user_repository,
)
from task_manager.users.models import User
from task_manager.users.repository import UserRepositoryInterface
from task_manager.users.schemas import (
    AuthResponse,
    MessageResponse,
    UserCreateRequest,
    UserLoginRequest,
    UserResponse,
    UserUpdateRequest,
)
from task_manager.users.service import AccountService, AuthService


async def get_account_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
) -> AccountService:
    """Dependency to get AccountService instance."""
    return AccountService(repository, task_service, notifier)


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        has_avatar=user.avatar is not None,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
)
async def signup(
    request: UserCreateRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Create an account and return it with its first token.

    - Password must be at least 7 characters and not contain "password"
    - Name must not contain "password"
    - Email must be unique
    """
    user, token = await auth_service.register_user(request)
    return AuthResponse(user=_user_response(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get a token",
)
async def login(
    request: UserLoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate by email and password.

    Every login adds a token; earlier tokens stay valid.
    Use it in the Authorization header: `Authorization: Bearer <token>`
    """
    user, token = await auth_service.login(request.email, request.password)
    return AuthResponse(user=_user_response(user), token=token)


@router.post("/logout", response_model=MessageResponse, summary="End this session")
async def logout(
    session: CurrentSession,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    await auth_service.logout(session.user, session.token)
    return MessageResponse(message="Logged out")


@router.post("/logoutAll", response_model=MessageResponse, summary="End every session")
async def logout_all(
    current_user: CurrentUser,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    await auth_service.logout_all(current_user)
    return MessageResponse(message="Logged out of all sessions")


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def get_me(current_user: CurrentUser) -> UserResponse:
    return _user_response(current_user)


@router.patch("/me", response_model=UserResponse, summary="Update current user")
async def update_me(
    request: UserUpdateRequest,
    current_user: CurrentUser,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    """
    Update name, email or password.

    Any other key rejects the whole request with 400.
    """
    user = await service.update_profile(current_user, request)
    return _user_response(user)


@router.delete("/me", response_model=UserResponse, summary="Delete current user")
async def delete_me(
    current_user: CurrentUser,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    """Delete the account together with all of its tasks."""
    user = await service.delete_account(current_user)
    return _user_response(user)


@router.post("/me/avatar", response_model=MessageResponse, summary="Upload avatar")
async def upload_avatar(
    current_user: CurrentUser,
    service: Annotated[AccountService, Depends(get_account_service)],
    avatar: UploadFile = File(..., description="jpg, jpeg or png image"),
) -> MessageResponse:
    # Read one byte past the limit so oversize files are detected without loading them whole
    data = await avatar.read(settings.AVATAR_MAX_BYTES + 1)
    await service.set_avatar(current_user, avatar.filename, data)
    return MessageResponse(message="Avatar uploaded")


@router.delete("/me/avatar", response_model=MessageResponse, summary="Remove avatar")
async def delete_avatar(
    current_user: CurrentUser,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    await service.remove_avatar(current_user)
    return MessageResponse(message="Avatar removed")


@router.get(
    "/{user_id}/avatar",
    response_class=Response,
    responses={200: {"content": {AVATAR_MEDIA_TYPE: {}}}},
    summary="Get a user's avatar",
)
async def get_avatar(
    user_id: str,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Response:
    image = await service.get_avatar(user_id)
    return Response(content=image, media_type=AVATAR_MEDIA_TYPE)
