"""Task query engine.

Filtered listing, text search, per-user work queues and the overdue list.
Owns sort-field whitelisting and pagination semantics. Reads always go to
the store; nothing here touches the result cache.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import asc, case, desc
from sqlalchemy.sql.elements import ColumnElement

from householdtodo.database.models import TaskDB
from householdtodo.database.repository import TaskRepository
from householdtodo.engine.filters import resolve_task_filters, overdue_predicate, require_household
from householdtodo.errors import InvalidArgumentError
from householdtodo.models.constants import MAX_PAGE_SIZE
from householdtodo.models.query import Page, PageRequest, TaskFilters, TaskSort
from householdtodo.models.task import Task, PRIORITY_LEVELS

logger = logging.getLogger(__name__)

# Priority sorts by ordinal level, not lexically.
PRIORITY_RANK = case(PRIORITY_LEVELS, value=TaskDB.priority, else_=0)

SORT_COLUMNS = {
    "createdAt": TaskDB.created_at,
    "updatedAt": TaskDB.updated_at,
    "dueDate": TaskDB.due_date,
    "priority": PRIORITY_RANK,
    "title": TaskDB.title,
}

# snake_case spellings accepted for Python callers and query strings
SORT_ALIASES = {
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "due_date": "dueDate",
}

SORT_DIRECTIONS = {"asc": asc, "desc": desc}


def resolve_page(page: Optional[PageRequest]) -> Tuple[int, int]:
    """Validate a page request and return (page_index, effective_size).

    Sizes above MAX_PAGE_SIZE are clamped rather than rejected.
    """
    page = page or PageRequest()
    if page.page < 0:
        raise InvalidArgumentError(f"page must be >= 0, got {page.page}")
    if page.size < 1:
        raise InvalidArgumentError(f"size must be >= 1, got {page.size}")
    return page.page, min(page.size, MAX_PAGE_SIZE)


def resolve_sort(sort: Optional[TaskSort]) -> List[ColumnElement]:
    """Translate a sort request into ORDER BY clauses, ending with id ascending.

    Raises:
        InvalidArgumentError: If the field or direction is not whitelisted
    """
    sort = sort or TaskSort()
    field = SORT_ALIASES.get(sort.sort_by, sort.sort_by)
    column = SORT_COLUMNS.get(field)
    if column is None:
        raise InvalidArgumentError(
            f"Invalid sort field '{sort.sort_by}'. Allowed: {', '.join(SORT_COLUMNS)}"
        )
    direction = SORT_DIRECTIONS.get((sort.sort_order or "").lower())
    if direction is None:
        raise InvalidArgumentError(f"Invalid sort order '{sort.sort_order}'. Allowed: asc, desc")

    order_by: List[ColumnElement] = []
    if field == "dueDate":
        # Tasks without a due date go last in either direction
        order_by.append(TaskDB.due_date.is_(None))
    order_by.append(direction(column))
    order_by.append(asc(TaskDB.id))
    return order_by


class TaskQueryEngine:
    """Read-side operations over a household's tasks."""

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def list_tasks(
        self,
        household_id: str,
        filters: Optional[TaskFilters] = None,
        sort: Optional[TaskSort] = None,
        page: Optional[PageRequest] = None,
    ) -> Page[Task]:
        """List live tasks matching every present filter, sorted and paginated."""
        predicate = resolve_task_filters(household_id, filters)
        order_by = resolve_sort(sort)
        page_index, size = resolve_page(page)
        logger.debug(f"Listing tasks for household {household_id} (page={page_index}, size={size})")

        items, total = self.repository.find_by_tenant_filtered(
            household_id, predicate, order_by, offset=page_index * size, limit=size
        )
        return Page[Task](items=items, page=page_index, size=size, total=total)

    def search_tasks(self, household_id: str, text: str, page: Optional[PageRequest] = None) -> Page[Task]:
        """Search title and description, case-insensitively, ranked by relevance then recency."""
        require_household(household_id)
        if text is None or not text.strip():
            raise InvalidArgumentError("Search text must not be empty")
        page_index, size = resolve_page(page)
        logger.debug(f"Searching tasks for household {household_id} with term: {text.strip()[:50]}")

        items, total = self.repository.search_by_tenant(
            household_id, text, offset=page_index * size, limit=size
        )
        return Page[Task](items=items, page=page_index, size=size, total=total)

    def tasks_by_user(self, household_id: str, user_id: str, page: Optional[PageRequest] = None) -> Page[Task]:
        """Work queue for one user: assigned tasks by due date (undated last)."""
        if not user_id:
            raise InvalidArgumentError("user_id is required")
        predicate = resolve_task_filters(household_id, TaskFilters(assigned_user_id=user_id))
        order_by = resolve_sort(TaskSort(sort_by="dueDate", sort_order="asc"))
        page_index, size = resolve_page(page)
        logger.debug(f"Getting tasks assigned to user {user_id} in household {household_id}")

        items, total = self.repository.find_by_tenant_filtered(
            household_id, predicate, order_by, offset=page_index * size, limit=size
        )
        return Page[Task](items=items, page=page_index, size=size, total=total)

    def overdue_tasks(self, household_id: str, now: Optional[datetime] = None) -> List[Task]:
        """All overdue tasks, earliest due date first. Not paginated."""
        now = now or datetime.utcnow()
        logger.debug(f"Getting overdue tasks for household {household_id}")
        return self.repository.find_all_by_tenant(
            household_id,
            overdue_predicate(household_id, now),
            [asc(TaskDB.due_date), asc(TaskDB.id)],
        )
