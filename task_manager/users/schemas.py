"""
Task Manager API - User Schemas

Pydantic models for account requests and responses.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator

FORBIDDEN_WORD = "password"

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72

# Names are trimmed; passwords are hashed exactly as sent
Name = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1, max_length=100)]
Password = Annotated[str, StringConstraints(strict=True, min_length=7)]


def _reject_forbidden_word(value: str, label: str) -> str:
    if FORBIDDEN_WORD in value.lower():
        raise ValueError(f'{label} cannot contain "{FORBIDDEN_WORD}"')
    return value


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return _reject_forbidden_word(value, "Password")


class UserCreateRequest(BaseModel):
    """Request schema for signup."""

    name: Name
    email: EmailStr
    password: Password

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _reject_forbidden_word(value, "Name")

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


class UserUpdateRequest(BaseModel):
    """Request schema for profile updates. Keys outside the model reject the request."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[Name] = None
    email: Optional[EmailStr] = None
    password: Optional[Password] = None

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _reject_forbidden_word(value, "Name")

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public user information. Password hash, tokens and avatar bytes stay private."""

    id: str
    name: str
    email: str
    has_avatar: bool = False
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Response schema for signup and login."""

    user: UserResponse
    token: str


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
