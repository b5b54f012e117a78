"""Household lookups and creation.

Households are the tenant boundary. The query engine never re-validates
them; callers (the API request context) check existence here once.
"""

import logging
from typing import Any, Dict, Optional

from householdtodo.database.household_repository import HouseholdRepository
from householdtodo.errors import InvalidArgumentError, NotFoundError
from householdtodo.models.household import Household
from householdtodo.models.task_factory import create_household_base

logger = logging.getLogger(__name__)


class HouseholdService:
    def __init__(self, repository: HouseholdRepository):
        self.repository = repository

    def create_household(
        self,
        name: str,
        description: Optional[str] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> Household:
        if not name or not name.strip():
            raise InvalidArgumentError("Household name is required")
        if len(name) > 255:
            raise InvalidArgumentError("Household name must be at most 255 characters")
        household = self.repository.save(create_household_base(name, description, settings))
        logger.info(f"Household created successfully with ID: {household.id}")
        return household

    def get_household(self, household_id: str) -> Household:
        household = self.repository.get(household_id)
        if household is None:
            raise NotFoundError("Household not found")
        return household

    def get_active_household(self, household_id: str) -> Household:
        """Like get_household, but an inactive household counts as missing."""
        household = self.get_household(household_id)
        if not household.is_active:
            raise NotFoundError("Household not found")
        return household
