"""Query inputs and result shapes for the task query engine."""

import math
from datetime import datetime
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, field_validator

from householdtodo.models.task import TaskStatus, TaskPriority, to_naive_utc
from householdtodo.models.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
)

T = TypeVar("T")


class TaskFilters(BaseModel):
    """Optional filter criteria for listing tasks.

    Every field is optional; an absent field imposes no constraint.
    Due date bounds are inclusive.
    """

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    category_id: Optional[str] = None
    assigned_user_id: Optional[str] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("due_date_from", "due_date_to")
    @classmethod
    def _normalize_bounds(cls, v):
        return to_naive_utc(v)


class TaskSort(BaseModel):
    """Requested ordering. Values are validated by the query engine, not here."""

    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = DEFAULT_SORT_ORDER


class PageRequest(BaseModel):
    """Offset-based page request (0-based page index)."""

    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE


class Page(BaseModel, Generic[T]):
    """One page of results plus the unclamped total count."""

    items: List[T] = Field(default_factory=list)
    page: int
    size: int = Field(..., description="Effective page size after clamping")
    total: int = Field(..., description="Total matching items across all pages")

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages


class TaskStatistics(BaseModel):
    """Aggregate task metrics for one household."""

    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int
    completion_rate: float = Field(..., description="completed / total * 100, 0.0 when total is 0")
