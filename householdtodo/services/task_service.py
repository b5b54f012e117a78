"""Task mutations and single-task lookups.

Every mutation writes through TaskRepository and then invalidates the task's
result cache entry before returning, so a read that follows a completed
write never sees the old value.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from householdtodo.database.category_repository import CategoryRepository
from householdtodo.database.repository import TaskRepository
from householdtodo.engine.cache import ResultCache, NullResultCache, task_key
from householdtodo.errors import InvalidArgumentError, NotFoundError
from householdtodo.models.task import Task, TaskCreate, TaskStatus, TaskUpdate
from householdtodo.models.task_factory import create_task_base

logger = logging.getLogger(__name__)


class TaskService:
    """Create, read, update, delete, assign and transition tasks."""

    def __init__(
        self,
        repository: TaskRepository,
        category_repository: CategoryRepository,
        cache: Optional[ResultCache] = None,
    ):
        self.repository = repository
        self.category_repository = category_repository
        self.cache = cache or NullResultCache()

    def _load(self, household_id: str, task_id: str) -> Task:
        """Fresh, uncached load used by mutations."""
        task = self.repository.find_by_tenant_and_id(household_id, task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def _require_active_category(self, household_id: str, category_id: str) -> None:
        if self.category_repository.find_by_tenant_and_id(household_id, category_id) is None:
            raise NotFoundError("Category not found")

    def _commit(self, task: Task) -> Task:
        saved = self.repository.save(task)
        self.cache.invalidate(task_key(task.id))
        return saved

    def get_task(self, household_id: str, task_id: str) -> Task:
        """Get a live task of the household, served from the cache when possible."""
        logger.debug(f"Getting task {task_id} for household {household_id}")
        task = self.cache.get_or_load(
            task_key(task_id),
            lambda: self.repository.find_by_tenant_and_id(household_id, task_id),
        )
        # Ids are global, so a cached hit may belong to another household.
        if task is None or task.household_id != household_id or task.is_deleted:
            raise NotFoundError("Task not found")
        return task

    def task_exists(self, household_id: str, task_id: str) -> bool:
        return self.repository.exists(household_id, task_id)

    def create_task(self, household_id: str, request: TaskCreate, created_by_user_id: str) -> Task:
        """Create a pending task. A referenced category must be active in the household."""
        logger.info(f"Creating task for household {household_id}, created by user {created_by_user_id}")
        if not created_by_user_id:
            raise InvalidArgumentError("created_by_user_id is required")
        if request.category_id is not None:
            self._require_active_category(household_id, request.category_id)

        task = create_task_base(household_id, created_by_user_id, request)
        saved = self._commit(task)
        logger.info(f"Task created successfully with ID: {saved.id}")
        return saved

    def update_task(self, household_id: str, task_id: str, update: TaskUpdate) -> Task:
        """Apply a partial update: only fields the caller set are changed."""
        logger.info(f"Updating task {task_id} for household {household_id}")
        task = self._load(household_id, task_id)

        changes = update.present_fields()
        if changes.get("category_id") is not None:
            self._require_active_category(household_id, changes["category_id"])
        if "tags" in changes:
            changes["tags"] = list(changes["tags"])

        changes["updated_at"] = datetime.utcnow()
        saved = self._commit(task.model_copy(update=changes))
        logger.info(f"Task updated successfully: {task_id}")
        return saved

    def delete_task(self, household_id: str, task_id: str, deleted_by_user_id: str) -> None:
        """Soft-delete a task; it disappears from every read immediately."""
        logger.info(f"Deleting task {task_id} for household {household_id}")
        task = self._load(household_id, task_id)
        now = datetime.utcnow()
        self._commit(
            task.model_copy(
                update={
                    "is_deleted": True,
                    "deleted_at": now,
                    "deleted_by_user_id": deleted_by_user_id,
                    "updated_at": now,
                }
            )
        )
        logger.info(f"Task deleted successfully: {task_id}")

    def purge_task(self, household_id: str, task_id: str) -> None:
        """Permanently delete a task, including one that was soft-deleted."""
        logger.info(f"Permanently deleting task {task_id} for household {household_id}")
        purged = self.repository.purge(household_id, task_id)
        self.cache.invalidate(task_key(task_id))
        if not purged:
            raise NotFoundError("Task not found")

    def update_task_status(
        self,
        household_id: str,
        task_id: str,
        status: Union[TaskStatus, str],
        updated_by_user_id: str,
    ) -> Task:
        """Change a task's status.

        Moving to completed records completed_at and completed_by_user_id the
        first time only; repeating the transition keeps the original values.
        Moving away from completed leaves them in place as history.
        """
        try:
            new_status = TaskStatus(status)
        except ValueError:
            raise InvalidArgumentError(f"Invalid task status '{status}'")

        logger.info(f"Updating task status: {task_id} to {new_status.value} for household {household_id}")
        task = self._load(household_id, task_id)

        now = datetime.utcnow()
        changes = {"status": new_status.value, "updated_at": now}
        if new_status == TaskStatus.COMPLETED and not task.is_completed:
            changes["completed_at"] = now
            changes["completed_by_user_id"] = updated_by_user_id

        saved = self._commit(task.model_copy(update=changes))
        logger.info(f"Task status updated successfully: {task_id} to {new_status.value}")
        return saved

    def assign_task(self, household_id: str, task_id: str, assigned_user_id: Optional[str]) -> Task:
        """Assign a task to a user, or unassign it with None."""
        logger.info(f"Assigning task {task_id} to user {assigned_user_id} in household {household_id}")
        task = self._load(household_id, task_id)
        saved = self._commit(
            task.model_copy(update={"assigned_user_id": assigned_user_id, "updated_at": datetime.utcnow()})
        )
        logger.info(f"Task assigned successfully: {task_id} to user {assigned_user_id}")
        return saved
