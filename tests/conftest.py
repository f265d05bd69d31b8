"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client with test settings
- Captured Celery task queueing
- Account and job factories
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.database import Base, get_db
from app.core.security import create_access_token, get_password_hash
from app.models.job import Job
from app.models.user import User, UserRole
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "CorrectHorse9!"


@pytest.fixture
def test_settings():
    """Settings with a fixed secret, cheap bcrypt and no rate limiting."""
    return Settings(
        SECRET_KEY="test-secret-key",
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        JOBS_REQUIRE_AUTH=False,
        JOB_PAGE_DEFAULT_LIMIT=3,
        JOB_PAGE_MAX_LIMIT=100,
    )


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, test_settings):
    """
    FastAPI test client with overridden database and settings dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def queued_tasks(monkeypatch):
    """
    Capture Celery tasks queued by the jobs endpoints instead of sending
    them to Redis.
    """
    calls = []

    def fake_queue(task, *args, **kwargs):
        calls.append({"task": task.name, "args": args, "kwargs": kwargs})
        return True

    monkeypatch.setattr("app.api.endpoints.jobs.queue_task_safely", fake_queue)
    return calls


@pytest.fixture
def create_user(db_session, test_settings):
    """Factory: insert an account directly and return it."""
    def _create_user(email="user@example.com", password=TEST_PASSWORD, role=UserRole.USER, name="Test User"):
        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password, test_settings),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def auth_headers(test_settings):
    """Factory: Authorization header carrying a valid token for a user."""
    def _auth_headers(user, expires_delta=None):
        token = create_access_token(
            data={"sub": str(user.id), "email": user.email},
            settings=test_settings,
            expires_delta=expires_delta,
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def create_job(db_session):
    """Factory: insert a job directly, optionally with an explicit created_at."""
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _create_job(title="Python Developer", company="Acme", location=None, salary=None, created_at=None):
        counter["n"] += 1
        job = Job(
            title=title,
            company=company,
            location=location,
            salary=salary,
            created_at=created_at or base_time + timedelta(minutes=counter["n"]),
        )
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _create_job


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Senior Python Developer",
        "company": "Acme Corp",
        "location": "Remote",
        "salary": 145000,
    }


@pytest.fixture
def test_password():
    """Password used by the create_user factory."""
    return TEST_PASSWORD
