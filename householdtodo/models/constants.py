"""Constants for householdtodo.

This module centralizes all magic numbers and default values used throughout the application.
"""

from householdtodo.models.task import TaskStatus, TaskPriority


# Task defaults
DEFAULT_TASK_STATUS = TaskStatus.PENDING
DEFAULT_TASK_PRIORITY = TaskPriority.MEDIUM

# Category defaults
DEFAULT_CATEGORY_SORT_ORDER = 0

# Pagination
DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100  # Larger requests are clamped, not rejected

# Sorting
DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_ORDER = "desc"
