import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError

from task_manager.config import settings
from task_manager.emails.notifications import NotificationDispatcher
from task_manager.errors import AuthError, ConflictError, LoginError, NotFoundError
from task_manager.tasks.service import TaskService
from task_manager.users.avatar import normalize_avatar, validate_avatar_upload
from task_manager.users.models import Session, User
from task_manager.users.repository import UserRepositoryInterface
from task_manager.users.schemas import MAX_PASSWORD_BYTES, UserCreateRequest, UserUpdateRequest

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


# bcrypt is deliberately slow; run it in a worker thread from async code
async def hash_password_async(password: str) -> str:
    return await asyncio.to_thread(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


class AuthService:
    """Credential checks and the per-user session token list."""

    def __init__(
        self,
        repository: UserRepositoryInterface,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        self.repository = repository
        self.notifier = notifier

    def create_access_token(self, user_id: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed token. ``jti`` keeps tokens from the same second distinct."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": user_id,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

    def decode_token(self, token: str) -> Optional[str]:
        """Decode and validate a token. Returns user_id if valid."""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
            )
        except JWTError:
            return None
        return payload.get("sub")

    async def issue_token(self, user: User) -> str:
        """Create a token and append it to the user's active list."""
        token = self.create_access_token(user_id=user.id)
        await self.repository.add_token(user.id, token)
        return token

    async def register_user(self, request: UserCreateRequest) -> tuple[User, str]:
        """Create an account, open its first session and queue the welcome mail."""
        if await self.repository.exists_by_email(request.email):
            raise ConflictError("Email is already registered")

        user = User.create(
            name=request.name,
            email=request.email,
            password_hash=await hash_password_async(request.password),
        )
        await self.repository.create(user)
        token = await self.issue_token(user)
        logger.info("Registered user id=%s", user.id)

        if self.notifier is not None:
            self.notifier.notify_welcome(user.email, user.name)

        return user, token

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and open an additional session."""
        # Longer input can never match a stored hash and bcrypt refuses it outright
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise LoginError()

        user = await self.repository.get_by_email(email.strip().lower())
        if user is None or not await verify_password_async(password, user.password_hash):
            raise LoginError()

        token = await self.issue_token(user)
        logger.info("User id=%s logged in", user.id)
        return user, token

    async def authenticate(self, token: Optional[str]) -> Session:
        """Resolve a bearer token to its user. The token must still be active."""
        if not token:
            raise AuthError()

        user_id = self.decode_token(token)
        if user_id is None:
            raise AuthError()

        user = await self.repository.get_by_token(user_id, token)
        if user is None:
            raise AuthError()

        return Session(user=user, token=token)

    async def logout(self, user: User, token: str) -> None:
        await self.repository.remove_token(user.id, token)
        logger.info("User id=%s logged out one session", user.id)

    async def logout_all(self, user: User) -> None:
        await self.repository.clear_tokens(user.id)
        logger.info("User id=%s logged out all sessions", user.id)


class AccountService:
    """Profile changes, account removal and avatars for an authenticated user."""

    def __init__(
        self,
        repository: UserRepositoryInterface,
        task_service: TaskService,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        self.repository = repository
        self.task_service = task_service
        self.notifier = notifier

    async def update_profile(self, user: User, request: UserUpdateRequest) -> User:
        """Apply an allow-listed update. Nothing is written if a check fails."""
        updates = request.model_dump(exclude_unset=True)
        if not updates:
            return user

        email = updates.get("email")
        if email is not None and email != user.email:
            if await self.repository.exists_by_email(email):
                raise ConflictError("Email is already registered")

        if "password" in updates:
            updates["password_hash"] = await hash_password_async(updates.pop("password"))

        updated = await self.repository.update(user.id, updates)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    async def delete_account(self, user: User) -> User:
        """Remove the user and every task it owns, then queue the farewell mail."""
        removed = await self.task_service.delete_all_for_owner(user.id)
        await self.repository.delete(user.id)
        logger.info("Deleted user id=%s and %d tasks", user.id, removed)

        if self.notifier is not None:
            self.notifier.notify_cancellation(user.email, user.name)

        return user

    async def set_avatar(self, user: User, filename: Optional[str], data: bytes) -> None:
        validate_avatar_upload(filename, data, settings.AVATAR_MAX_BYTES)
        # Pillow is CPU bound; keep it off the event loop
        image = await asyncio.to_thread(normalize_avatar, data, settings.AVATAR_SIZE)
        await self.repository.update(user.id, {"avatar": image})
        logger.info("Stored %d byte avatar for user id=%s", len(image), user.id)

    async def remove_avatar(self, user: User) -> None:
        await self.repository.update(user.id, {"avatar": None})

    async def get_avatar(self, user_id: str) -> bytes:
        user = await self.repository.get_by_id(user_id)
        if user is None or not user.avatar:
            raise NotFoundError("Avatar not found")
        return user.avatar
