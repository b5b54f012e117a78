"""Task query, filtering and statistics engine for householdtodo."""

from householdtodo.engine.filters import resolve_task_filters, overdue_predicate
from householdtodo.engine.query import TaskQueryEngine, resolve_page, resolve_sort
from householdtodo.engine.statistics import StatisticsAggregator, completion_rate
from householdtodo.engine.cache import ResultCache, InMemoryResultCache, NullResultCache, build_result_cache

__all__ = [
    "resolve_task_filters",
    "overdue_predicate",
    "TaskQueryEngine",
    "resolve_page",
    "resolve_sort",
    "StatisticsAggregator",
    "completion_rate",
    "ResultCache",
    "InMemoryResultCache",
    "NullResultCache",
    "build_result_cache",
]
