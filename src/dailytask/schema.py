"""
DAILY TASK CLI - Task Schema Definition
=======================================
Data model for the local task list: one Task per line item, plus the
statistics summary computed over the whole list.

Stored field names follow the on-disk JSON document (createdAt,
completedAt); Python attributes use snake_case via pydantic aliases.
"""

from enum import Enum
from typing import Optional, Any
from datetime import datetime, date, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    """Task lifecycle states"""
    PENDING = "pending"       # Not done yet
    COMPLETED = "completed"   # Done, completed_at is set


class TaskPriority(str, Enum):
    """Task priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def normalize(cls, raw: Any) -> "TaskPriority":
        """Case-insensitive lookup; anything unknown falls back to MEDIUM."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM

    @classmethod
    def is_valid(cls, raw: Optional[str]) -> bool:
        return raw is not None and raw.strip().lower() in {p.value for p in cls}


class TaskFilter(str, Enum):
    """Named views over the task list"""
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    HIGH = "high"
    TODAY = "today"

    @classmethod
    def parse(cls, raw: Any) -> Optional["TaskFilter"]:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class Task(BaseModel):
    """Individual task definition"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    description: str
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING

    # Timestamps (UTC)
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    @field_validator("description", mode="before")
    @classmethod
    def _strip_description(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> TaskPriority:
        return TaskPriority.normalize(value)

    @field_validator("created_at", "completed_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive timestamps on disk are UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def created_on(self, day: date) -> bool:
        """True if the task was created on the given local calendar day."""
        return self.created_at.astimezone().date() == day


class TaskStats(BaseModel):
    """Summary counters over the whole task list"""
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    completed: int = 0
    pending: int = 0
    completion_rate: int = Field(default=0, alias="completionRate")
    high_priority: int = Field(default=0, alias="highPriority")
    today: int = 0
