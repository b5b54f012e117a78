"""Mutation services for householdtodo."""

from householdtodo.services.task_service import TaskService
from householdtodo.services.category_service import CategoryService, CategoryCreate, CategoryUpdate
from householdtodo.services.household_service import HouseholdService

__all__ = [
    "TaskService",
    "CategoryService",
    "CategoryCreate",
    "CategoryUpdate",
    "HouseholdService",
]
