"""Pytest fixtures and configuration for Focal tests."""

import os

# Keep the app's module-level engine off disk during tests.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from focal.database.database import Base, get_db
from focal.database import models  # noqa: F401  (registers tables on Base)
from focal.database.task_template_repository import TaskTemplateRepository
from focal.database.completion_record_repository import CompletionRecordRepository
from focal.models.recurrence import NoRecurrence
from focal.models.task_factory import create_task_template
from focal.recurrence.calendar import CalendarContext


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def template_repository(db_session: Session):
    """Create a TaskTemplateRepository instance for testing."""
    return TaskTemplateRepository(db_session)


@pytest.fixture
def completion_repository(db_session: Session):
    """Create a CompletionRecordRepository instance for testing."""
    return CompletionRecordRepository(db_session)


@pytest.fixture
def utc_calendar():
    return CalendarContext.from_name("UTC")


@pytest.fixture
def ny_calendar():
    """Calendar with DST (spring forward on 2024-03-10)."""
    return CalendarContext.from_name("America/New_York")


@pytest.fixture
def monday_anchor():
    """2024-01-01 is a Monday."""
    return datetime(2024, 1, 1, 9, 0)


@pytest.fixture
def make_template(monday_anchor):
    """Factory for task templates anchored on Monday 2024-01-01 09:00 by default."""

    def _make(recurrence=None, anchor_start=None, **overrides):
        return create_task_template(
            title=overrides.pop("title", "Test Task"),
            anchor_start=anchor_start or monday_anchor,
            duration=overrides.pop("duration", timedelta(minutes=30)),
            recurrence=recurrence if recurrence is not None else NoRecurrence(),
            **overrides,
        )

    return _make


@pytest.fixture
def test_client(db_session: Session, monkeypatch):
    """Create a FastAPI test client with overridden database dependency."""
    from focal.api.app import app

    monkeypatch.setenv("FOCAL_TIME_ZONE", "UTC")

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
