"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- Seed data: companies c1-c3, jobs J1-J3, users u1, u2 and admin
- FastAPI test client and auth headers
"""

import os

# Must be set before the application settings are loaded
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault("JSON_LOGS", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Application, ApplicationState, Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves ON DELETE CASCADE off unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@event.listens_for(engine, "before_cursor_execute", retval=True)
def _ilike_to_like(conn, cursor, statement, parameters, context, executemany):
    # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
    return statement.replace(" ILIKE ", " LIKE "), parameters


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
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
def seed(db_session):
    """
    Populate the database and return the generated job ids.

    u1 has applied to J1.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ])
    db_session.add_all([
        User(username="u1", password=get_password_hash("password1"), first_name="U1F",
             last_name="U1L", email="u1@email.com", is_admin=False),
        User(username="u2", password=get_password_hash("password2"), first_name="U2F",
             last_name="U2L", email="u2@email.com", is_admin=False),
        User(username="admin", password=get_password_hash("adminpass"), first_name="AdF",
             last_name="AdL", email="admin@email.com", is_admin=True),
    ])
    db_session.flush()

    jobs = [
        Job(title="J1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        Job(title="J2", salary=200, equity=Decimal("0.1"), company_handle="c2"),
        Job(title="J3", salary=300, equity=Decimal("0"), company_handle="c3"),
    ]
    db_session.add_all(jobs)
    db_session.flush()

    db_session.add(Application(username="u1", job_id=jobs[0].id, state=ApplicationState.APPLIED))
    db_session.commit()

    return {"job_ids": [job.id for job in jobs]}


@pytest.fixture
def job_ids(seed):
    return seed["job_ids"]


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def u1_headers():
    return {"Authorization": f"Bearer {create_access_token('u1')}"}


@pytest.fixture
def u2_headers():
    return {"Authorization": f"Bearer {create_access_token('u2')}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin', is_admin=True)}"}
