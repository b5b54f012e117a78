"""SQLAlchemy database models for householdtodo."""

from datetime import datetime
import uuid
from typing import Union, TypeVar, Type
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text, ForeignKey, Index

from householdtodo.database.database import Base
from householdtodo.models.task import TaskStatus, TaskPriority

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class HouseholdDB(Base):
    """Database model for Household."""

    __tablename__ = "households"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    settings = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from householdtodo.models.household import Household
        return Household(
            id=self.id,
            name=self.name,
            description=self.description,
            settings=self.settings,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, household):
        """Create database model from Pydantic model."""
        return cls(
            id=household.id,
            name=household.name,
            description=household.description,
            settings=household.settings,
            is_active=household.is_active,
            created_at=household.created_at,
            updated_at=household.updated_at,
        )


class CategoryDB(Base):
    """Database model for Category."""

    __tablename__ = "categories"
    __table_args__ = (
        # Name uniqueness is enforced among active rows only, in the service layer.
        Index("ix_categories_household_name", "household_id", "name"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    household_id = Column(String, ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=True)
    icon = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from householdtodo.models.category import Category
        return Category(
            id=self.id,
            household_id=self.household_id,
            name=self.name,
            description=self.description,
            color=self.color,
            icon=self.icon,
            sort_order=self.sort_order,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, category):
        """Create database model from Pydantic model."""
        return cls(
            id=category.id,
            household_id=category.household_id,
            name=category.name,
            description=category.description,
            color=category.color,
            icon=category.icon,
            sort_order=category.sort_order,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )

    def apply(self, category) -> None:
        """Copy mutable fields from a Pydantic model onto this row."""
        self.name = category.name
        self.description = category.description
        self.color = category.color
        self.icon = category.icon
        self.sort_order = category.sort_order
        self.is_active = category.is_active
        self.updated_at = category.updated_at


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_household_live", "household_id", "is_deleted"),
        Index("ix_tasks_household_status", "household_id", "status"),
    )

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Tenant association
    household_id = Column(String, ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)

    # Weak reference: category id only, no ownership
    category_id = Column(String, nullable=True, index=True)

    # Basic fields
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=TaskStatus.PENDING.value)
    priority = Column(String, nullable=False, default=TaskPriority.MEDIUM.value)

    # Scheduling fields
    due_date = Column(DateTime, nullable=True, index=True)
    estimated_duration_minutes = Column(Integer, nullable=True)

    # External user references
    assigned_user_id = Column(String, nullable=True, index=True)
    created_by_user_id = Column(String, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    completed_by_user_id = Column(String, nullable=True)

    # Tags (ordered JSON array) and opaque blobs
    tags = Column(JSON, nullable=False, default=list)
    recurring_pattern = Column(JSON, nullable=True)
    attachments = Column(JSON, nullable=True)
    custom_fields = Column(JSON, nullable=True)

    # Soft delete
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by_user_id = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from householdtodo.models.task import Task

        return Task(
            id=self.id,
            household_id=self.household_id,
            category_id=self.category_id,
            title=self.title,
            description=self.description,
            status=value_to_enum(self.status, TaskStatus, TaskStatus.PENDING),
            priority=value_to_enum(self.priority, TaskPriority, TaskPriority.MEDIUM),
            due_date=self.due_date,
            estimated_duration_minutes=self.estimated_duration_minutes,
            assigned_user_id=self.assigned_user_id,
            created_by_user_id=self.created_by_user_id,
            completed_at=self.completed_at,
            completed_by_user_id=self.completed_by_user_id,
            tags=list(self.tags or []),
            recurring_pattern=self.recurring_pattern,
            attachments=self.attachments,
            custom_fields=self.custom_fields,
            is_deleted=bool(self.is_deleted),
            deleted_at=self.deleted_at,
            deleted_by_user_id=self.deleted_by_user_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        row = cls(id=task.id, household_id=task.household_id, created_at=task.created_at)
        row.apply(task)
        return row

    def apply(self, task) -> None:
        """Copy every mutable field from a Pydantic model onto this row.

        Handles enum values (Pydantic with use_enum_values=True returns strings).
        """
        self.category_id = task.category_id
        self.title = task.title
        self.description = task.description
        self.status = enum_to_value(task.status)
        self.priority = enum_to_value(task.priority)
        self.due_date = task.due_date
        self.estimated_duration_minutes = task.estimated_duration_minutes
        self.assigned_user_id = task.assigned_user_id
        self.created_by_user_id = task.created_by_user_id
        self.completed_at = task.completed_at
        self.completed_by_user_id = task.completed_by_user_id
        self.tags = list(task.tags)
        self.recurring_pattern = task.recurring_pattern
        self.attachments = task.attachments
        self.custom_fields = task.custom_fields
        self.is_deleted = task.is_deleted
        self.deleted_at = task.deleted_at
        self.deleted_by_user_id = task.deleted_by_user_id
        self.updated_at = task.updated_at
