"""Category management within a household."""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from householdtodo.database.category_repository import CategoryRepository
from householdtodo.engine.cache import ResultCache, NullResultCache, category_key
from householdtodo.errors import ConflictError, InvalidArgumentError, NotFoundError
from householdtodo.models.category import Category, is_valid_color
from householdtodo.models.task_factory import create_category_base

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_ICON_LENGTH = 50


class CategoryCreate(BaseModel):
    """Input for creating a category. Validated by CategoryService."""

    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None


class CategoryUpdate(BaseModel):
    """Partial update for a category.

    Omitted fields are unchanged. Explicit None clears description, color
    and icon, and is ignored for name and sort_order.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None

    def present_fields(self) -> dict:
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None or name in ("description", "color", "icon")
        }


def _validate_fields(
    name: Optional[str] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
    icon: Optional[str] = None,
) -> None:
    if name is not None:
        if not name.strip():
            raise InvalidArgumentError("Category name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidArgumentError(f"Category name must be at most {MAX_NAME_LENGTH} characters")
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidArgumentError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    if not is_valid_color(color):
        raise InvalidArgumentError(f"Color must be a valid hex color code, got '{color}'")
    if icon is not None and len(icon) > MAX_ICON_LENGTH:
        raise InvalidArgumentError(f"Icon must be at most {MAX_ICON_LENGTH} characters")


class CategoryService:
    """Create, read, update and delete categories."""

    def __init__(self, repository: CategoryRepository, cache: Optional[ResultCache] = None):
        self.repository = repository
        self.cache = cache or NullResultCache()

    def _load(self, household_id: str, category_id: str) -> Category:
        category = self.repository.find_by_tenant_and_id(household_id, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def _ensure_unique_name(self, household_id: str, name: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.exists_active_name(household_id, name, exclude_id=exclude_id):
            raise ConflictError(f"Category with name '{name}' already exists in this household")

    def _commit(self, category: Category) -> Category:
        saved = self.repository.save(category)
        self.cache.invalidate(category_key(category.id))
        return saved

    def create_category(self, household_id: str, request: CategoryCreate) -> Category:
        """Create an active category; the name must be free among active categories."""
        logger.info(f"Creating category for household {household_id} with name: {request.name}")
        _validate_fields(request.name, request.description, request.color, request.icon)
        self._ensure_unique_name(household_id, request.name)

        category = create_category_base(
            household_id,
            request.name,
            description=request.description,
            color=request.color,
            icon=request.icon,
            sort_order=request.sort_order,
        )
        saved = self._commit(category)
        logger.info(f"Category created successfully with ID: {saved.id}")
        return saved

    def get_category(self, household_id: str, category_id: str) -> Category:
        logger.debug(f"Getting category {category_id} for household {household_id}")
        category = self.cache.get_or_load(
            category_key(category_id),
            lambda: self.repository.find_by_tenant_and_id(household_id, category_id),
        )
        if category is None or category.household_id != household_id or not category.is_active:
            raise NotFoundError("Category not found")
        return category

    def update_category(self, household_id: str, category_id: str, update: CategoryUpdate) -> Category:
        """Apply a partial update; renaming checks for a clash with other active categories."""
        logger.info(f"Updating category {category_id} for household {household_id}")
        category = self._load(household_id, category_id)

        changes = update.present_fields()
        _validate_fields(
            changes.get("name"),
            changes.get("description"),
            changes.get("color"),
            changes.get("icon"),
        )
        if "name" in changes and changes["name"] != category.name:
            self._ensure_unique_name(household_id, changes["name"], exclude_id=category_id)

        changes["updated_at"] = datetime.utcnow()
        saved = self._commit(category.model_copy(update=changes))
        logger.info(f"Category updated successfully: {category_id}")
        return saved

    def delete_category(self, household_id: str, category_id: str) -> None:
        """Deactivate a category. Refused while any live task still references it."""
        logger.info(f"Deleting category {category_id} for household {household_id}")
        category = self._load(household_id, category_id)

        task_count = self.repository.count_tasks(household_id, category_id)
        if task_count > 0:
            raise ConflictError(
                f"Cannot delete category with {task_count} existing task(s). "
                "Please reassign or delete tasks first."
            )

        self._commit(category.model_copy(update={"is_active": False, "updated_at": datetime.utcnow()}))
        logger.info(f"Category deleted successfully: {category_id}")

    def list_categories(self, household_id: str) -> List[Category]:
        logger.debug(f"Getting categories for household {household_id}")
        return self.repository.find_active(household_id)

    def category_exists(self, household_id: str, category_id: str) -> bool:
        return self.repository.find_by_tenant_and_id(household_id, category_id) is not None

    def category_count(self, household_id: str) -> int:
        return self.repository.count_active(household_id)
