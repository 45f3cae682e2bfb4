# =============================================================================
# core/models/task.py - Task Schemas
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field

from .base import CamelModel


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCreate(CamelModel):
    """
    Schema for creating a task.

    `assignedTo` defaults to the caller when omitted.
    """
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    assigned_to: str | None = None
    tags: list[str] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    clearable_fields: ClassVar[frozenset[str]] = frozenset({"description", "due_date", "assigned_to"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assigned_to: str | None = None
    tags: list[str] | None = None
