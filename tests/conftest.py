"""Pytest fixtures and configuration for householdtodo tests."""

import pytest
from datetime import datetime
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from unittest.mock import patch
import uuid

from householdtodo.database.database import Base, register_sqlite_functions
from householdtodo.database.models import HouseholdDB
from householdtodo.database.repository import TaskRepository
from householdtodo.database.category_repository import CategoryRepository
from householdtodo.database.household_repository import HouseholdRepository
from householdtodo.engine.cache import InMemoryResultCache
from householdtodo.engine.query import TaskQueryEngine
from householdtodo.engine.statistics import StatisticsAggregator
from householdtodo.models.task import Task, TaskStatus, TaskPriority
from householdtodo.services.task_service import TaskService
from householdtodo.services.category_service import CategoryService
from householdtodo.services.household_service import HouseholdService


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


def _add_household(session: Session, household_id: str, name: str) -> None:
    now = datetime.utcnow()
    session.add(HouseholdDB(id=household_id, name=name, is_active=True, created_at=now, updated_at=now))
    session.commit()


@pytest.fixture
def test_household_id():
    """Household the tests act as."""
    return "household-123"


@pytest.fixture
def other_household_id():
    """Second household for tenant isolation tests."""
    return "household-456"


@pytest.fixture
def test_user_id():
    """External user id of the acting member."""
    return "user-123"


@pytest.fixture(scope="function")
def db_session(test_household_id, other_household_id):
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test,
    with two households already present.
    """
    # Create engine with StaticPool for in-memory database
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        register_sqlite_functions(dbapi_conn)

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    # Households are required by the foreign keys on categories and tasks
    _add_household(session, test_household_id, "Test Household")
    _add_household(session, other_household_id, "Other Household")

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def category_repository(db_session: Session):
    """Create a CategoryRepository instance for testing."""
    return CategoryRepository(db_session)


@pytest.fixture
def household_service(db_session: Session):
    return HouseholdService(HouseholdRepository(db_session))


@pytest.fixture
def result_cache():
    """Fresh in-memory result cache per test."""
    return InMemoryResultCache(max_entries=64)


@pytest.fixture
def task_service(task_repository, category_repository, result_cache):
    return TaskService(task_repository, category_repository, result_cache)


@pytest.fixture
def category_service(category_repository, result_cache):
    return CategoryService(category_repository, result_cache)


@pytest.fixture
def query_engine(task_repository):
    return TaskQueryEngine(task_repository)


@pytest.fixture
def statistics(task_repository, category_repository):
    return StatisticsAggregator(task_repository, category_repository)


@pytest.fixture
def sample_task_base(test_household_id, test_user_id):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "household_id": test_household_id,
        "category_id": None,
        "title": "Test Task",
        "description": "Test description",
        "status": TaskStatus.PENDING,
        "priority": TaskPriority.MEDIUM,
        "due_date": None,
        "estimated_duration_minutes": 30,
        "assigned_user_id": None,
        "created_by_user_id": test_user_id,
        "tags": [],
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(task_repository, sample_task_base):
    """Persist a task built from sample_task_base plus overrides."""

    def _make(**overrides) -> Task:
        fields = {**sample_task_base, "id": str(uuid.uuid4()), **overrides}
        return task_repository.save(Task(**fields))

    return _make


@pytest.fixture
def auth_headers(test_household_id, test_user_id):
    """Request context headers forwarded by the gateway."""
    return {"X-Household-Id": test_household_id, "X-User-Id": test_user_id}


@pytest.fixture
def test_client(db_session: Session, result_cache):
    """Create a FastAPI test client with overridden database and cache dependencies."""
    from householdtodo.api.app import app
    from householdtodo.api.dependencies import get_result_cache
    from householdtodo.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_result_cache] = lambda: result_cache

    # The test schema is already in place; skip startup schema init
    with patch("householdtodo.api.app.init_db"), TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
