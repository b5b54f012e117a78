"""Repository for Household database operations."""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from householdtodo.models.household import Household
from householdtodo.database.models import HouseholdDB
from householdtodo.database.store_guard import store_guard

logger = logging.getLogger(__name__)


class HouseholdRepository:
    """Repository for Household database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, household_id: str) -> Optional[Household]:
        """Get household by ID."""
        with store_guard(self.db, f"load household {household_id}"):
            row = self.db.query(HouseholdDB).filter(HouseholdDB.id == household_id).first()
        return row.to_pydantic() if row else None

    def save(self, household: Household) -> Household:
        """Create or update household (upsert)."""
        with store_guard(self.db, f"save household {household.id}"):
            row = self.db.query(HouseholdDB).filter(HouseholdDB.id == household.id).first()
            if row is None:
                row = HouseholdDB.from_pydantic(household)
                self.db.add(row)
            else:
                row.name = household.name
                row.description = household.description
                row.settings = household.settings
                row.is_active = household.is_active
                row.updated_at = household.updated_at
            self.db.commit()
            self.db.refresh(row)
        logger.debug(f"Saved household {household.id}: {household.name}")
        return row.to_pydantic()
