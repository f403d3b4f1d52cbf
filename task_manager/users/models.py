
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
import uuid


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User account with its active session tokens."""

    id: str
    name: str
    email: str
    password_hash: str
    tokens: List[str] = field(default_factory=list)
    avatar: Optional[bytes] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(cls, name: str, email: str, password_hash: str) -> "User":
        """Create a new user with generated ID."""
        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            tokens=[],
            avatar=None,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert user to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "tokens": list(self.tokens),
            "avatar": self.avatar,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create user from MongoDB document."""
        avatar = data.get("avatar")
        return cls(
            id=data["_id"],
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            tokens=list(data.get("tokens", [])),
            avatar=bytes(avatar) if avatar is not None else None,
            created_at=data["created_at"],
            updated_at=data.get("updated_at", data["created_at"]),
        )


@dataclass
class Session:
    """An authenticated request: the user and the token it presented."""

    user: User
    token: str
