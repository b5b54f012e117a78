"""Entity creation factory for householdtodo.

This module centralizes creation logic so every new household, category and
task starts from the same defaults.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from householdtodo.models.task import Task, TaskCreate
from householdtodo.models.category import Category
from householdtodo.models.household import Household
from householdtodo.models.constants import (
    DEFAULT_TASK_STATUS,
    DEFAULT_TASK_PRIORITY,
    DEFAULT_CATEGORY_SORT_ORDER,
)


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "status": DEFAULT_TASK_STATUS,
        "priority": DEFAULT_TASK_PRIORITY,
        "tags": [],
        "is_deleted": False,
    }


def create_task_base(household_id: str, created_by_user_id: str, request: TaskCreate) -> Task:
    """Create a new task from a creation request, applying defaults.

    Args:
        household_id: Household that owns the task (required)
        created_by_user_id: External id of the creating user (required)
        request: Validated creation request

    Returns:
        Task object with defaults applied, not yet persisted
    """
    now = datetime.utcnow()
    defaults = create_task_defaults()

    return Task(
        id=str(uuid.uuid4()),
        household_id=household_id,
        category_id=request.category_id,
        title=request.title,
        description=request.description,
        status=defaults["status"],
        priority=request.priority if request.priority is not None else defaults["priority"],
        due_date=request.due_date,
        estimated_duration_minutes=request.estimated_duration_minutes,
        assigned_user_id=request.assigned_user_id,
        created_by_user_id=created_by_user_id,
        tags=list(request.tags) if request.tags is not None else defaults["tags"],
        recurring_pattern=request.recurring_pattern,
        attachments=request.attachments,
        custom_fields=request.custom_fields,
        is_deleted=defaults["is_deleted"],
        created_at=now,
        updated_at=now,
    )


def create_category_base(
    household_id: str,
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
    icon: Optional[str] = None,
    sort_order: Optional[int] = None,
) -> Category:
    """Create a new active category with defaults applied."""
    now = datetime.utcnow()
    return Category(
        id=str(uuid.uuid4()),
        household_id=household_id,
        name=name,
        description=description,
        color=color,
        icon=icon,
        sort_order=sort_order if sort_order is not None else DEFAULT_CATEGORY_SORT_ORDER,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def create_household_base(
    name: str,
    description: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
) -> Household:
    """Create a new active household."""
    now = datetime.utcnow()
    return Household(
        id=str(uuid.uuid4()),
        name=name,
        description=description,
        settings=settings,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
