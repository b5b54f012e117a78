"""Filter resolution for task queries.

Turns an optional filter bag into a single conjunctive SQLAlchemy predicate,
always scoped to one household and to live (non-deleted) tasks. The overdue
predicate is defined here once and reused by listing, the overdue query and
statistics.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, false
from sqlalchemy.sql.elements import ColumnElement

from householdtodo.database.models import TaskDB
from householdtodo.errors import InvalidArgumentError
from householdtodo.models.query import TaskFilters
from householdtodo.models.task import ACTIONABLE_STATUSES, to_naive_utc


def require_household(household_id: Optional[str]) -> str:
    if household_id is None or not str(household_id).strip():
        raise InvalidArgumentError("household_id is required")
    return household_id


def live_task_conditions(household_id: str) -> List[ColumnElement]:
    """Base scope shared by every task read: one household, not soft-deleted."""
    household_id = require_household(household_id)
    return [
        TaskDB.household_id == household_id,
        TaskDB.is_deleted == false(),
    ]


def filter_conditions(filters: Optional[TaskFilters]) -> List[ColumnElement]:
    """One condition per present filter field; absent fields add nothing."""
    if filters is None:
        return []

    conditions: List[ColumnElement] = []
    if filters.status is not None:
        conditions.append(TaskDB.status == filters.status)
    if filters.priority is not None:
        conditions.append(TaskDB.priority == filters.priority)
    if filters.category_id is not None:
        conditions.append(TaskDB.category_id == filters.category_id)
    if filters.assigned_user_id is not None:
        conditions.append(TaskDB.assigned_user_id == filters.assigned_user_id)
    if filters.due_date_from is not None:
        conditions.append(TaskDB.due_date >= filters.due_date_from)
    if filters.due_date_to is not None:
        conditions.append(TaskDB.due_date <= filters.due_date_to)
    return conditions


def resolve_task_filters(household_id: str, filters: Optional[TaskFilters] = None) -> ColumnElement:
    """Build the predicate for `list_tasks`.

    Args:
        household_id: Household scope (mandatory)
        filters: Optional filter bag; None or an empty bag means all live tasks

    Returns:
        A single AND-ed SQLAlchemy predicate over TaskDB

    Raises:
        InvalidArgumentError: If household_id is missing
    """
    return and_(*live_task_conditions(household_id), *filter_conditions(filters))


def overdue_conditions(now: datetime) -> List[ColumnElement]:
    """Due date set and in the past, status still pending or in progress."""
    return [
        TaskDB.due_date.isnot(None),
        TaskDB.due_date < to_naive_utc(now),
        TaskDB.status.in_([status.value for status in ACTIONABLE_STATUSES]),
    ]


def overdue_predicate(household_id: str, now: datetime) -> ColumnElement:
    """Predicate for overdue live tasks of a household at instant `now`."""
    return and_(*live_task_conditions(household_id), *overdue_conditions(now))


def status_predicate(household_id: str, status: str) -> ColumnElement:
    """Predicate for live tasks of a household in one status."""
    return and_(*live_task_conditions(household_id), TaskDB.status == status)
