"""FastAPI dependencies: request context, repositories, services, cache."""

from dataclasses import dataclass
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from householdtodo.database.database import get_db
from householdtodo.database.repository import TaskRepository
from householdtodo.database.category_repository import CategoryRepository
from householdtodo.database.household_repository import HouseholdRepository
from householdtodo.engine.cache import ResultCache, build_result_cache
from householdtodo.engine.query import TaskQueryEngine
from householdtodo.engine.statistics import StatisticsAggregator
from householdtodo.errors import NotFoundError
from householdtodo.services.task_service import TaskService
from householdtodo.services.category_service import CategoryService
from householdtodo.services.household_service import HouseholdService

# Process-wide result cache, handed to services explicitly per request.
_result_cache = build_result_cache()


@dataclass
class RequestContext:
    """Caller identity, as forwarded by the upstream gateway."""

    household_id: str
    user_id: str


def get_result_cache() -> ResultCache:
    return _result_cache


def get_household_service(db: Session = Depends(get_db)) -> HouseholdService:
    return HouseholdService(HouseholdRepository(db))


def get_request_context(
    x_household_id: str = Header(default="", alias="X-Household-Id"),
    x_user_id: str = Header(default="", alias="X-User-Id"),
    households: HouseholdService = Depends(get_household_service),
) -> RequestContext:
    """Resolve the calling household and user from request headers.

    Raises:
        HTTPException: 401 if either header is missing, 404 if the household
            does not exist or is inactive
    """
    if not x_household_id or not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Household-Id and X-User-Id headers are required",
        )
    try:
        households.get_active_household(x_household_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Household not found")
    return RequestContext(household_id=x_household_id, user_id=x_user_id)


def get_task_service(
    db: Session = Depends(get_db),
    cache: ResultCache = Depends(get_result_cache),
) -> TaskService:
    return TaskService(TaskRepository(db), CategoryRepository(db), cache)


def get_category_service(
    db: Session = Depends(get_db),
    cache: ResultCache = Depends(get_result_cache),
) -> CategoryService:
    return CategoryService(CategoryRepository(db), cache)


def get_query_engine(db: Session = Depends(get_db)) -> TaskQueryEngine:
    return TaskQueryEngine(TaskRepository(db))


def get_statistics(db: Session = Depends(get_db)) -> StatisticsAggregator:
    return StatisticsAggregator(TaskRepository(db), CategoryRepository(db))
