"""Repository layer for task database operations.

TaskRepository is the entity store the query engine, statistics aggregator
and task service run against. Every method is scoped by household.
"""

import logging
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_, case, desc, func, false, String
from sqlalchemy.sql.elements import ColumnElement

from householdtodo.models.task import Task
from householdtodo.database.models import TaskDB
from householdtodo.database.store_guard import store_guard
from householdtodo.errors import NotFoundError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def like_pattern(text: str) -> str:
    """Case-folded substring LIKE pattern with wildcards in `text` escaped."""
    escaped = (
        text.lower()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, household_id: str, predicate: Optional[ColumnElement] = None):
        """Query restricted to one household; the predicate never widens it."""
        query = self.db.query(TaskDB).filter(TaskDB.household_id == household_id)
        if predicate is not None:
            query = query.filter(predicate)
        return query

    def find_by_tenant_and_id(self, household_id: str, task_id: str) -> Optional[Task]:
        """Get a live task by ID for a specific household."""
        with store_guard(self.db, f"load task {task_id}"):
            task_db = self.db.query(TaskDB).filter(
                TaskDB.id == task_id,
                TaskDB.household_id == household_id,
                TaskDB.is_deleted == false(),
            ).first()
        return task_db.to_pydantic() if task_db else None

    def exists(self, household_id: str, task_id: str) -> bool:
        """Whether a live task with this ID exists in the household."""
        with store_guard(self.db, f"check task {task_id}"):
            row = self.db.query(TaskDB.id).filter(
                TaskDB.id == task_id,
                TaskDB.household_id == household_id,
                TaskDB.is_deleted == false(),
            ).first()
        return row is not None

    def find_by_tenant_filtered(
        self,
        household_id: str,
        predicate: ColumnElement,
        order_by: Sequence[ColumnElement],
        offset: int,
        limit: Optional[int],
    ) -> Tuple[List[Task], int]:
        """Get one ordered page of matching tasks plus the total match count."""
        with store_guard(self.db, f"list tasks for household {household_id}"):
            query = self._scoped(household_id, predicate)
            total = query.count()
            page_query = query.order_by(*order_by).offset(offset)
            if limit is not None:
                page_query = page_query.limit(limit)
            tasks_db = page_query.all()
        return [task_db.to_pydantic() for task_db in tasks_db], int(total)

    def find_all_by_tenant(
        self,
        household_id: str,
        predicate: ColumnElement,
        order_by: Sequence[ColumnElement],
    ) -> List[Task]:
        """Get every matching task, ordered, without paging."""
        with store_guard(self.db, f"list tasks for household {household_id}"):
            tasks_db = self._scoped(household_id, predicate).order_by(*order_by).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def search_by_tenant(
        self,
        household_id: str,
        text: str,
        offset: int,
        limit: int,
    ) -> Tuple[List[Task], int]:
        """Case-insensitive substring search over title and description.

        Results are ranked: exact title match, then title substring, then
        description-only match; ties newest first, then by id.
        """
        term = text.strip().lower()
        pattern = like_pattern(term)
        title_lower = func.lower(TaskDB.title, type_=String)
        title_hit = title_lower.like(pattern, escape=LIKE_ESCAPE)
        description_hit = func.lower(TaskDB.description, type_=String).like(pattern, escape=LIKE_ESCAPE)
        relevance = case(
            (title_lower == term, 0),
            (title_hit, 1),
            else_=2,
        )

        with store_guard(self.db, f"search tasks for household {household_id}"):
            query = self._scoped(
                household_id,
                and_(TaskDB.is_deleted == false(), or_(title_hit, description_hit)),
            )
            total = query.count()
            tasks_db = (
                query.order_by(relevance, desc(TaskDB.created_at), TaskDB.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
        return [task_db.to_pydantic() for task_db in tasks_db], int(total)

    def count_by_tenant(self, household_id: str, predicate: Optional[ColumnElement] = None) -> int:
        """Count tasks of a household matching a predicate."""
        with store_guard(self.db, f"count tasks for household {household_id}"):
            total = self._scoped(household_id, predicate).count()
        return int(total)

    def count_by_category(self, household_id: str, category_ids: Sequence[str]) -> dict:
        """Live task counts per category id (ids without tasks map to 0)."""
        counts = {category_id: 0 for category_id in category_ids}
        if not counts:
            return counts
        with store_guard(self.db, f"count category tasks for household {household_id}"):
            rows = (
                self.db.query(TaskDB.category_id, func.count(TaskDB.id))
                .filter(
                    TaskDB.household_id == household_id,
                    TaskDB.is_deleted == false(),
                    TaskDB.category_id.in_(list(counts)),
                )
                .group_by(TaskDB.category_id)
                .all()
            )
        for category_id, count in rows:
            counts[category_id] = int(count)
        return counts

    def save(self, task: Task) -> Task:
        """Create or update a task (upsert by id, within its household)."""
        with store_guard(self.db, f"save task {task.id}"):
            task_db = self.db.query(TaskDB).filter(TaskDB.id == task.id).first()
            if task_db is None:
                task_db = TaskDB.from_pydantic(task)
                self.db.add(task_db)
                action = "Created"
            elif task_db.household_id != task.household_id:
                raise NotFoundError(f"Task {task.id} not found")
            else:
                task_db.apply(task)
                action = "Updated"
            self.db.commit()
            self.db.refresh(task_db)
        logger.debug(f"{action} task {task.id}: {task.title[:50]}")
        return task_db.to_pydantic()

    def purge(self, household_id: str, task_id: str) -> bool:
        """Permanently delete a task (live or soft-deleted) for a household."""
        with store_guard(self.db, f"purge task {task_id}"):
            task_db = self.db.query(TaskDB).filter(
                TaskDB.id == task_id,
                TaskDB.household_id == household_id,
            ).first()
            if not task_db:
                return False
            self.db.delete(task_db)
            self.db.commit()
        logger.debug(f"Purged task {task_id}")
        return True
