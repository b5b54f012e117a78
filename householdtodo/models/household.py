"""Household data model for householdtodo."""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class Household(BaseModel):
    """Tenant root. Every category and task belongs to exactly one household."""

    id: str = Field(..., description="Unique household identifier (UUID v4)")
    name: str = Field(..., min_length=1, max_length=255, description="Household name")
    description: Optional[str] = Field(None, max_length=1000, description="Household description")
    settings: Optional[Dict[str, Any]] = Field(None, description="Opaque household settings")
    is_active: bool = Field(True, description="Whether the household is active")
    created_at: datetime = Field(..., description="Household creation timestamp")
    updated_at: datetime = Field(..., description="Household last update timestamp")
