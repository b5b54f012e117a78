"""Repository for Category database operations."""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import false, true

from householdtodo.models.category import Category
from householdtodo.database.models import CategoryDB, TaskDB
from householdtodo.database.store_guard import store_guard
from householdtodo.errors import NotFoundError

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for Category database operations."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_tenant_and_id(self, household_id: str, category_id: str) -> Optional[Category]:
        """Get an active category by ID (household-scoped)."""
        with store_guard(self.db, f"load category {category_id}"):
            row = self.db.query(CategoryDB).filter(
                CategoryDB.id == category_id,
                CategoryDB.household_id == household_id,
                CategoryDB.is_active == true(),
            ).first()
        return row.to_pydantic() if row else None

    def find_active(self, household_id: str) -> List[Category]:
        """Get all active categories of a household ordered by sort_order."""
        with store_guard(self.db, f"list categories for household {household_id}"):
            rows = self.db.query(CategoryDB).filter(
                CategoryDB.household_id == household_id,
                CategoryDB.is_active == true(),
            ).order_by(CategoryDB.sort_order, CategoryDB.name, CategoryDB.id).all()
        return [row.to_pydantic() for row in rows]

    def exists_active_name(self, household_id: str, name: str, exclude_id: Optional[str] = None) -> bool:
        """Whether an active category with this exact (case-sensitive) name exists."""
        with store_guard(self.db, f"check category name for household {household_id}"):
            query = self.db.query(CategoryDB.id).filter(
                CategoryDB.household_id == household_id,
                CategoryDB.name == name,
                CategoryDB.is_active == true(),
            )
            if exclude_id is not None:
                query = query.filter(CategoryDB.id != exclude_id)
            row = query.first()
        return row is not None

    def count_active(self, household_id: str) -> int:
        with store_guard(self.db, f"count categories for household {household_id}"):
            return int(self.db.query(CategoryDB).filter(
                CategoryDB.household_id == household_id,
                CategoryDB.is_active == true(),
            ).count())

    def count_tasks(self, household_id: str, category_id: str) -> int:
        """Live tasks referencing the category, whatever their status."""
        with store_guard(self.db, f"count tasks for category {category_id}"):
            return int(self.db.query(TaskDB).filter(
                TaskDB.household_id == household_id,
                TaskDB.category_id == category_id,
                TaskDB.is_deleted == false(),
            ).count())

    def save(self, category: Category) -> Category:
        """Create or update a category (upsert by id, within its household)."""
        with store_guard(self.db, f"save category {category.id}"):
            row = self.db.query(CategoryDB).filter(CategoryDB.id == category.id).first()
            if row is None:
                row = CategoryDB.from_pydantic(category)
                self.db.add(row)
                action = "Created"
            elif row.household_id != category.household_id:
                raise NotFoundError(f"Category {category.id} not found")
            else:
                row.apply(category)
                action = "Updated"
            self.db.commit()
            self.db.refresh(row)
        logger.debug(f"{action} category {category.id}: {category.name}")
        return row.to_pydantic()
