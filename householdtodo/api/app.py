"""FastAPI web application for householdtodo."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from householdtodo.api.dependencies import (
    RequestContext,
    get_category_service,
    get_household_service,
    get_query_engine,
    get_request_context,
    get_statistics,
    get_task_service,
)
from householdtodo.database.database import init_db
from householdtodo.engine.query import TaskQueryEngine
from householdtodo.engine.statistics import StatisticsAggregator
from householdtodo.errors import (
    ConflictError,
    HouseholdTodoError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from householdtodo.models.category import Category, CategoryWithTaskCount
from householdtodo.models.household import Household
from householdtodo.models.query import Page, PageRequest, TaskFilters, TaskSort, TaskStatistics
from householdtodo.models.task import Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate
from householdtodo.services.category_service import CategoryCreate, CategoryService, CategoryUpdate
from householdtodo.services.household_service import HouseholdService
from householdtodo.services.task_service import TaskService

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="householdtodo API",
    description="Household task and category management",
    version=API_VERSION,
    lifespan=lifespan,
)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(HouseholdTodoError)
async def householdtodo_error_handler(request: Request, exc: HouseholdTodoError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__, "retryable": exc.retryable},
    )


# Request / response models
class TaskResponse(Task):
    """Task with derived display fields."""

    overdue: bool
    completed: bool
    priority_rank: int

    @classmethod
    def from_task(cls, task: Task, now: Optional[datetime] = None) -> "TaskResponse":
        return cls(
            **task.model_dump(),
            overdue=task.is_overdue(now),
            completed=task.is_completed,
            priority_rank=task.priority_level,
        )


class TaskEnvelope(BaseModel):
    task: TaskResponse


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]
    page: int
    size: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page[Task]) -> "TaskListResponse":
        now = datetime.utcnow()
        return cls(
            tasks=[TaskResponse.from_task(task, now) for task in page.items],
            page=page.page,
            size=page.size,
            total=page.total,
            total_pages=page.total_pages,
        )


class OverdueResponse(BaseModel):
    tasks: List[TaskResponse]
    count: int


class StatusChangeRequest(BaseModel):
    status: TaskStatus


class AssignRequest(BaseModel):
    assigned_user_id: Optional[str] = None


class HouseholdCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None


class CategoryListResponse(BaseModel):
    categories: List[Category]
    count: int


class CategoryCountsResponse(BaseModel):
    categories: List[CategoryWithTaskCount]
    count: int


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


# Households
@app.post("/households", response_model=Household, status_code=status.HTTP_201_CREATED)
def create_household(
    request: HouseholdCreateRequest,
    households: HouseholdService = Depends(get_household_service),
):
    return households.create_household(request.name, request.description, request.settings)


@app.get("/households/{household_id}", response_model=Household)
def get_household(household_id: str, households: HouseholdService = Depends(get_household_service)):
    return households.get_household(household_id)


# Tasks
@app.post("/tasks", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    request: TaskCreate,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    task = tasks.create_task(ctx.household_id, request, ctx.user_id)
    return TaskEnvelope(task=TaskResponse.from_task(task))


@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    category_id: Optional[str] = None,
    assigned_user_id: Optional[str] = None,
    due_date_from: Optional[datetime] = None,
    due_date_to: Optional[datetime] = None,
    page: int = 0,
    size: int = 20,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
    ctx: RequestContext = Depends(get_request_context),
    engine: TaskQueryEngine = Depends(get_query_engine),
):
    """List tasks with optional filters, sorting and pagination."""
    filters = TaskFilters(
        status=status_filter,
        priority=priority,
        category_id=category_id,
        assigned_user_id=assigned_user_id,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )
    result = engine.list_tasks(
        ctx.household_id,
        filters,
        TaskSort(sort_by=sort_by, sort_order=sort_order),
        PageRequest(page=page, size=size),
    )
    return TaskListResponse.from_page(result)


@app.get("/tasks/search", response_model=TaskListResponse)
def search_tasks(
    q: str = "",
    page: int = 0,
    size: int = 20,
    ctx: RequestContext = Depends(get_request_context),
    engine: TaskQueryEngine = Depends(get_query_engine),
):
    result = engine.search_tasks(ctx.household_id, q, PageRequest(page=page, size=size))
    return TaskListResponse.from_page(result)


@app.get("/tasks/assigned/{user_id}", response_model=TaskListResponse)
def tasks_by_user(
    user_id: str,
    page: int = 0,
    size: int = 20,
    ctx: RequestContext = Depends(get_request_context),
    engine: TaskQueryEngine = Depends(get_query_engine),
):
    result = engine.tasks_by_user(ctx.household_id, user_id, PageRequest(page=page, size=size))
    return TaskListResponse.from_page(result)


@app.get("/tasks/overdue", response_model=OverdueResponse)
def overdue_tasks(
    ctx: RequestContext = Depends(get_request_context),
    engine: TaskQueryEngine = Depends(get_query_engine),
):
    now = datetime.utcnow()
    overdue = engine.overdue_tasks(ctx.household_id, now)
    return OverdueResponse(tasks=[TaskResponse.from_task(t, now) for t in overdue], count=len(overdue))


@app.get("/tasks/statistics", response_model=TaskStatistics)
def task_statistics(
    ctx: RequestContext = Depends(get_request_context),
    stats: StatisticsAggregator = Depends(get_statistics),
):
    return stats.task_statistics(ctx.household_id)


@app.get("/tasks/{task_id}", response_model=TaskEnvelope)
def get_task(
    task_id: str,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    return TaskEnvelope(task=TaskResponse.from_task(tasks.get_task(ctx.household_id, task_id)))


@app.put("/tasks/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: str,
    request: TaskUpdate,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    task = tasks.update_task(ctx.household_id, task_id, request)
    return TaskEnvelope(task=TaskResponse.from_task(task))


@app.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    permanent: bool = False,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    if permanent:
        tasks.purge_task(ctx.household_id, task_id)
    else:
        tasks.delete_task(ctx.household_id, task_id, ctx.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.patch("/tasks/{task_id}/status", response_model=TaskEnvelope)
def update_task_status(
    task_id: str,
    request: StatusChangeRequest,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    task = tasks.update_task_status(ctx.household_id, task_id, request.status, ctx.user_id)
    return TaskEnvelope(task=TaskResponse.from_task(task))


@app.patch("/tasks/{task_id}/assign", response_model=TaskEnvelope)
def assign_task(
    task_id: str,
    request: AssignRequest,
    ctx: RequestContext = Depends(get_request_context),
    tasks: TaskService = Depends(get_task_service),
):
    task = tasks.assign_task(ctx.household_id, task_id, request.assigned_user_id)
    return TaskEnvelope(task=TaskResponse.from_task(task))


# Categories
@app.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryCreate,
    ctx: RequestContext = Depends(get_request_context),
    categories: CategoryService = Depends(get_category_service),
):
    return categories.create_category(ctx.household_id, request)


@app.get("/categories")
def list_categories(
    with_task_counts: bool = False,
    ctx: RequestContext = Depends(get_request_context),
    categories: CategoryService = Depends(get_category_service),
    stats: StatisticsAggregator = Depends(get_statistics),
):
    if with_task_counts:
        counted = stats.category_task_counts(ctx.household_id)
        return CategoryCountsResponse(categories=counted, count=len(counted))
    listed = categories.list_categories(ctx.household_id)
    return CategoryListResponse(categories=listed, count=len(listed))


@app.get("/categories/{category_id}", response_model=Category)
def get_category(
    category_id: str,
    ctx: RequestContext = Depends(get_request_context),
    categories: CategoryService = Depends(get_category_service),
):
    return categories.get_category(ctx.household_id, category_id)


@app.put("/categories/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    request: CategoryUpdate,
    ctx: RequestContext = Depends(get_request_context),
    categories: CategoryService = Depends(get_category_service),
):
    return categories.update_category(ctx.household_id, category_id, request)


@app.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    ctx: RequestContext = Depends(get_request_context),
    categories: CategoryService = Depends(get_category_service),
):
    categories.delete_category(ctx.household_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
