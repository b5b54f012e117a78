"""Data models for householdtodo."""

from householdtodo.models.task import Task, TaskStatus, TaskPriority, TaskCreate, TaskUpdate
from householdtodo.models.category import Category, CategoryWithTaskCount
from householdtodo.models.household import Household
from householdtodo.models.query import TaskFilters, TaskSort, PageRequest, Page, TaskStatistics

__all__ = [
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskCreate",
    "TaskUpdate",
    "Category",
    "CategoryWithTaskCount",
    "Household",
    "TaskFilters",
    "TaskSort",
    "PageRequest",
    "Page",
    "TaskStatistics",
]
