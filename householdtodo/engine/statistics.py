"""Statistics aggregation over a household's live tasks.

Counts are computed live from the store on every call; there are no
pre-aggregated counters. The overdue bucket uses the same predicate as
`TaskQueryEngine.overdue_tasks`, so for a given `now` the two always agree.
"""

import logging
from datetime import datetime
from typing import List, Optional

from householdtodo.database.category_repository import CategoryRepository
from householdtodo.database.repository import TaskRepository
from householdtodo.engine.filters import resolve_task_filters, overdue_predicate, status_predicate
from householdtodo.models.category import CategoryWithTaskCount
from householdtodo.models.query import TaskStatistics
from householdtodo.models.task import TaskStatus

logger = logging.getLogger(__name__)


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks; 0.0 for an empty household."""
    if total <= 0:
        return 0.0
    return completed / total * 100


class StatisticsAggregator:
    """Computes per-household task metrics."""

    def __init__(self, repository: TaskRepository, category_repository: CategoryRepository):
        self.repository = repository
        self.category_repository = category_repository

    def task_statistics(self, household_id: str, now: Optional[datetime] = None) -> TaskStatistics:
        """Total, per-status and overdue counts plus completion rate."""
        now = now or datetime.utcnow()
        logger.debug(f"Getting task statistics for household {household_id}")

        total = self.repository.count_by_tenant(household_id, resolve_task_filters(household_id))
        by_status = {
            status: self.repository.count_by_tenant(household_id, status_predicate(household_id, status.value))
            for status in TaskStatus
        }
        overdue = self.repository.count_by_tenant(household_id, overdue_predicate(household_id, now))
        completed = by_status[TaskStatus.COMPLETED]

        return TaskStatistics(
            total=total,
            pending=by_status[TaskStatus.PENDING],
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            completed=completed,
            cancelled=by_status[TaskStatus.CANCELLED],
            overdue=overdue,
            completion_rate=completion_rate(completed, total),
        )

    def category_task_counts(self, household_id: str) -> List[CategoryWithTaskCount]:
        """Active categories (by sort order) with the number of live tasks in each."""
        categories = self.category_repository.find_active(household_id)
        counts = self.repository.count_by_category(household_id, [c.id for c in categories])
        return [
            CategoryWithTaskCount(category=category, task_count=counts.get(category.id, 0))
            for category in categories
        ]
