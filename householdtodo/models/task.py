"""Task data model for householdtodo."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC. Naive values are taken as UTC already."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TaskStatus(str, Enum):
    """Task status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses in which a past due date makes a task overdue
ACTIONABLE_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def level(self) -> int:
        """Ordinal ranking used for sorting and display (low=1 ... urgent=4)."""
        return PRIORITY_LEVELS[self.value]


PRIORITY_LEVELS = {
    TaskPriority.LOW.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.HIGH.value: 3,
    TaskPriority.URGENT.value: 4,
}


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    household_id: str = Field(..., description="Household that owns this task")
    category_id: Optional[str] = Field(None, description="Category id (weak reference)")
    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: Optional[str] = Field(None, max_length=1000, description="Task description")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Task status")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    due_date: Optional[datetime] = Field(None, description="Task due date")
    estimated_duration_minutes: Optional[int] = Field(None, gt=0, description="Estimated duration in minutes")
    assigned_user_id: Optional[str] = Field(None, description="External id of the assigned user")
    created_by_user_id: str = Field(..., description="External id of the creating user")
    completed_at: Optional[datetime] = Field(None, description="Set on transition to completed")
    completed_by_user_id: Optional[str] = Field(None, description="Set on transition to completed")
    tags: List[str] = Field(default_factory=list, description="Ordered list of tags")
    recurring_pattern: Optional[Dict[str, Any]] = Field(None, description="Opaque recurrence definition")
    attachments: Optional[List[Any]] = Field(None, description="Opaque attachment descriptors")
    custom_fields: Optional[Dict[str, Any]] = Field(None, description="Opaque custom fields")
    is_deleted: bool = Field(False, description="Soft-delete flag")
    deleted_at: Optional[datetime] = Field(None, description="Soft-delete timestamp")
    deleted_by_user_id: Optional[str] = Field(None, description="User who soft-deleted the task")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v):
        # Stored and compared as naive UTC
        return to_naive_utc(v)

    @property
    def priority_level(self) -> int:
        return PRIORITY_LEVELS[TaskPriority(self.priority).value]

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Due date has passed while the task is still pending or in progress."""
        now = to_naive_utc(now) or datetime.utcnow()
        return (
            self.due_date is not None
            and self.due_date < now
            and self.status in ACTIONABLE_STATUSES
        )


class TaskCreate(BaseModel):
    """Input for creating a task. Defaults are applied by the task factory."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    estimated_duration_minutes: Optional[int] = Field(None, gt=0)
    assigned_user_id: Optional[str] = None
    tags: Optional[List[str]] = None
    recurring_pattern: Optional[Dict[str, Any]] = None
    attachments: Optional[List[Any]] = None
    custom_fields: Optional[Dict[str, Any]] = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v):
        return to_naive_utc(v)


class TaskUpdate(BaseModel):
    """Partial update for a task.

    Only fields present in ``model_fields_set`` are applied. Omitting a field
    leaves it unchanged; explicitly passing None clears nullable fields
    (see ``NULLABLE_UPDATE_FIELDS``) and is ignored for required ones.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    estimated_duration_minutes: Optional[int] = Field(None, gt=0)
    assigned_user_id: Optional[str] = None
    tags: Optional[List[str]] = None
    recurring_pattern: Optional[Dict[str, Any]] = None
    attachments: Optional[List[Any]] = None
    custom_fields: Optional[Dict[str, Any]] = None

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v):
        return to_naive_utc(v)

    def present_fields(self) -> Dict[str, Any]:
        """Fields the caller actually supplied, with enum values unwrapped."""
        values = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name not in NULLABLE_UPDATE_FIELDS:
                continue
            values[name] = value.value if isinstance(value, Enum) else value
        return values


NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "description",
        "category_id",
        "due_date",
        "estimated_duration_minutes",
        "assigned_user_id",
        "recurring_pattern",
        "attachments",
        "custom_fields",
    }
)
