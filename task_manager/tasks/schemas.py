"""
Task Manager API - Task Schemas

Pydantic models for task API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class TaskCreateRequest(BaseModel):
    """Request model for creating a task. Unknown keys such as owner are dropped."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(min_length=1, max_length=5000, description="Task description")
    completed: StrictBool = Field(default=False, description="Completion flag")


class TaskUpdateRequest(BaseModel):
    """Request model for updating a task. Any key outside the model rejects the request."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    description: Optional[str] = Field(default=None, min_length=1, max_length=5000, description="Task description")
    completed: Optional[StrictBool] = Field(default=None, description="Completion flag")

    @field_validator("description", "completed", mode="before")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskResponse(BaseModel):
    """Response model for a single task."""

    id: str = Field(description="Task ID")
    owner_id: str = Field(description="Owner user ID")
    description: str = Field(description="Task description")
    completed: bool = Field(description="Completion flag")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")
