"""Tests for task model helpers and the task factory."""

from datetime import datetime, timedelta, timezone

from householdtodo.models.task import Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate
from householdtodo.models.task_factory import create_task_base


class TestTaskModel:
    def test_priority_level(self, sample_task_base):
        assert Task(**{**sample_task_base, "priority": TaskPriority.LOW}).priority_level == 1
        assert Task(**{**sample_task_base, "priority": TaskPriority.URGENT}).priority_level == 4
        assert TaskPriority.HIGH.level == 3

    def test_enum_values_are_stored_as_strings(self, sample_task):
        assert sample_task.status == "pending"
        assert sample_task.priority == "medium"

    def test_is_overdue(self, sample_task_base):
        now = datetime(2026, 6, 1, 12, 0)
        late = Task(**{**sample_task_base, "due_date": now - timedelta(minutes=1)})
        assert late.is_overdue(now) is True
        assert Task(**{**sample_task_base, "due_date": now}).is_overdue(now) is False
        assert Task(**{**sample_task_base}).is_overdue(now) is False
        assert late.model_copy(update={"status": TaskStatus.CANCELLED.value}).is_overdue(now) is False


class TestTaskUpdate:
    def test_omitted_fields_are_absent(self):
        assert TaskUpdate(title="New").present_fields() == {"title": "New"}

    def test_explicit_none_kept_only_for_nullable_fields(self):
        fields = TaskUpdate(due_date=None, title=None, tags=None).present_fields()
        assert fields == {"due_date": None}

    def test_enum_values_unwrapped(self):
        assert TaskUpdate(priority=TaskPriority.HIGH).present_fields() == {"priority": "high"}


class TestTaskFactory:
    def test_defaults_applied(self, test_household_id, test_user_id):
        task = create_task_base(test_household_id, test_user_id, TaskCreate(title="Vacuum"))
        assert task.status == TaskStatus.PENDING
        assert task.priority == TaskPriority.MEDIUM
        assert task.tags == []
        assert task.is_deleted is False
        assert task.created_at == task.updated_at

    def test_request_values_win(self, test_household_id, test_user_id):
        task = create_task_base(
            test_household_id,
            test_user_id,
            TaskCreate(title="Vacuum", priority=TaskPriority.HIGH, tags=["floors"], assigned_user_id="u1"),
        )
        assert task.priority == TaskPriority.HIGH
        assert task.tags == ["floors"]
        assert task.assigned_user_id == "u1"


class TestDueDateNormalization:
    def test_aware_due_date_becomes_naive_utc(self, sample_task_base):
        due = datetime(2026, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert Task(**{**sample_task_base, "due_date": due}).due_date == datetime(2026, 3, 1, 14, 0)
        assert TaskCreate(title="x", due_date=due).due_date == datetime(2026, 3, 1, 14, 0)
        assert TaskUpdate(due_date=due).present_fields() == {"due_date": datetime(2026, 3, 1, 14, 0)}

    def test_naive_due_date_is_kept(self, sample_task_base):
        due = datetime(2026, 3, 1, 9, 0)
        assert Task(**{**sample_task_base, "due_date": due}).due_date == due

    def test_is_overdue_accepts_aware_now(self, sample_task_base):
        task = Task(**{**sample_task_base, "due_date": datetime(2026, 3, 1, 12, 0)})
        # 13:30 at UTC+2 is 11:30 UTC, before the due date
        assert task.is_overdue(datetime(2026, 3, 1, 13, 30, tzinfo=timezone(timedelta(hours=2)))) is False
        assert task.is_overdue(datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)) is True

    def test_filter_bounds_become_naive_utc(self):
        from householdtodo.models.query import TaskFilters

        bound = datetime(2026, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=3)))
        assert TaskFilters(due_date_from=bound).due_date_from == datetime(2026, 3, 1, 7, 0)
