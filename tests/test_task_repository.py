"""Tests for TaskRepository operations."""

import pytest
from unittest.mock import patch

from sqlalchemy import asc
from sqlalchemy.exc import OperationalError

from householdtodo.database.models import TaskDB
from householdtodo.database.repository import like_pattern
from householdtodo.engine.filters import resolve_task_filters
from householdtodo.errors import NotFoundError, StoreUnavailableError
from householdtodo.models.task import Task, TaskStatus


class TestTaskRepository:
    """Test TaskRepository CRUD and scoped queries."""

    def test_save_creates_task(self, task_repository, sample_task, test_household_id):
        created = task_repository.save(sample_task)

        assert created.id == sample_task.id
        assert created.title == sample_task.title
        assert created.status == TaskStatus.PENDING
        assert created.household_id == test_household_id

    def test_find_by_tenant_and_id(self, task_repository, sample_task, test_household_id):
        task_repository.save(sample_task)
        retrieved = task_repository.find_by_tenant_and_id(test_household_id, sample_task.id)

        assert retrieved is not None
        assert retrieved.id == sample_task.id

    def test_find_nonexistent_task(self, task_repository, test_household_id):
        assert task_repository.find_by_tenant_and_id(test_household_id, "nonexistent-id") is None

    def test_find_other_household_task_returns_none(self, task_repository, sample_task, other_household_id):
        task_repository.save(sample_task)
        assert task_repository.find_by_tenant_and_id(other_household_id, sample_task.id) is None
        assert task_repository.exists(other_household_id, sample_task.id) is False

    def test_soft_deleted_task_is_not_found(self, task_repository, sample_task_base, test_household_id):
        task = task_repository.save(Task(**{**sample_task_base, "is_deleted": True}))
        assert task_repository.find_by_tenant_and_id(test_household_id, task.id) is None

    def test_save_updates_existing_task(self, task_repository, sample_task, test_household_id):
        task_repository.save(sample_task)
        updated = task_repository.save(
            sample_task.model_copy(update={"title": "Updated", "tags": ["weekly", "kitchen"]})
        )

        assert updated.title == "Updated"
        assert updated.tags == ["weekly", "kitchen"]
        assert task_repository.find_by_tenant_and_id(test_household_id, sample_task.id).title == "Updated"

    def test_save_refuses_cross_household_overwrite(self, task_repository, sample_task, other_household_id):
        task_repository.save(sample_task)
        with pytest.raises(NotFoundError):
            task_repository.save(sample_task.model_copy(update={"household_id": other_household_id}))

    def test_tags_keep_order(self, task_repository, sample_task_base, test_household_id):
        task = task_repository.save(Task(**{**sample_task_base, "tags": ["b", "a", "c"]}))
        assert task_repository.find_by_tenant_and_id(test_household_id, task.id).tags == ["b", "a", "c"]

    def test_find_by_tenant_filtered_returns_page_and_total(self, make_task, task_repository, test_household_id):
        for i in range(5):
            make_task(title=f"Task {i}")

        items, total = task_repository.find_by_tenant_filtered(
            test_household_id,
            resolve_task_filters(test_household_id),
            [asc(TaskDB.title)],
            offset=2,
            limit=2,
        )
        assert total == 5
        assert [t.title for t in items] == ["Task 2", "Task 3"]

    def test_predicate_cannot_widen_household_scope(
        self, make_task, task_repository, test_household_id, other_household_id
    ):
        make_task(household_id=other_household_id, title="Not mine")
        items, total = task_repository.find_by_tenant_filtered(
            test_household_id,
            resolve_task_filters(other_household_id),
            [asc(TaskDB.id)],
            offset=0,
            limit=10,
        )
        assert items == []
        assert total == 0

    def test_count_by_category(self, make_task, task_repository, test_household_id):
        make_task(category_id="cat-1")
        make_task(category_id="cat-1")
        make_task(category_id="cat-1", is_deleted=True)
        make_task(category_id="cat-2")

        counts = task_repository.count_by_category(test_household_id, ["cat-1", "cat-2", "cat-3"])
        assert counts == {"cat-1": 2, "cat-2": 1, "cat-3": 0}

    def test_purge_removes_soft_deleted_task(self, task_repository, sample_task_base, test_household_id):
        task = task_repository.save(Task(**{**sample_task_base, "is_deleted": True}))
        assert task_repository.purge(test_household_id, task.id) is True
        assert task_repository.count_by_tenant(test_household_id) == 0

    def test_purge_nonexistent_task(self, task_repository, test_household_id):
        assert task_repository.purge(test_household_id, "nonexistent-id") is False

    def test_store_failure_raises_store_unavailable(self, task_repository, test_household_id):
        with patch.object(
            task_repository.db, "query", side_effect=OperationalError("SELECT", {}, Exception("db down"))
        ):
            with pytest.raises(StoreUnavailableError) as exc_info:
                task_repository.find_by_tenant_and_id(test_household_id, "any-id")
        assert exc_info.value.retryable is True


class TestLikePattern:
    def test_wildcards_are_escaped(self):
        assert like_pattern("50%_off") == "%50\\%\\_off%"

    def test_lowercases(self):
        assert like_pattern("Trash") == "%trash%"
