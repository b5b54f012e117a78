"""Category data model for householdtodo."""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_valid_color(color: Optional[str]) -> bool:
    """A missing color is valid; a present one must be a #RRGGBB hex code."""
    return color is None or bool(COLOR_PATTERN.match(color))


class Category(BaseModel):
    """Category grouping tasks within a household (e.g. Kitchen, Outdoor)."""

    id: str = Field(..., description="Unique category identifier (UUID v4)")
    household_id: str = Field(..., description="Household that owns this category")
    name: str = Field(..., min_length=1, max_length=100, description="Name, unique among active categories")
    description: Optional[str] = Field(None, max_length=500, description="Category description")
    color: Optional[str] = Field(None, description="Hex color code (#RRGGBB)")
    icon: Optional[str] = Field(None, max_length=50, description="Icon name")
    sort_order: int = Field(0, description="Display order (ascending)")
    is_active: bool = Field(True, description="False once the category is deleted")
    created_at: datetime = Field(..., description="Category creation timestamp")
    updated_at: datetime = Field(..., description="Category last update timestamp")


class CategoryWithTaskCount(BaseModel):
    """Active category with the number of live tasks that reference it."""

    category: Category
    task_count: int
