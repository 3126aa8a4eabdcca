"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Seeded companies, jobs and users, plus bearer tokens
"""

import os

# Must be set before the app modules build their engine and hashing context
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, QueryExecutor, SessionLocal, engine, get_db
from app.core.security import create_access_token, get_password_hash
from app.models import Company, Job, User
from main import app


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def executor(db_session):
    """QueryExecutor bound to the test session"""
    return QueryExecutor(db_session)


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
def seeded(db_session):
    """
    Three companies (c1..c3), three jobs and two users.

    Returns a dict of job title -> job id.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", num_employees=1, description="Desc1", logo_url="http://c1.img"),
        Company(handle="c2", name="C2", num_employees=2, description="Desc2", logo_url="http://c2.img"),
        Company(handle="c3", name="C3", num_employees=3, description="Desc3", logo_url="http://c3.img"),
    ])
    db_session.commit()

    jobs = [
        Job(title="j1", salary=100, equity=0.1, company_handle="c1"),
        Job(title="j2", salary=200, equity=0, company_handle="c1"),
        Job(title="j3", salary=300, equity=None, company_handle="c2"),
    ]
    db_session.add_all(jobs)
    db_session.add_all([
        User(username="u1", password=get_password_hash("password1"), first_name="U1F",
             last_name="U1L", email="user1@user.com", is_admin=False),
        User(username="admin", password=get_password_hash("password2"), first_name="AdF",
             last_name="AdL", email="admin@user.com", is_admin=True),
    ])
    db_session.commit()

    return {job.title: job.id for job in jobs}


@pytest.fixture
def u1_headers():
    """Bearer header for the non-admin user u1"""
    return {"Authorization": f"Bearer {create_access_token('u1', is_admin=False)}"}


@pytest.fixture
def admin_headers():
    """Bearer header for the admin user"""
    return {"Authorization": f"Bearer {create_access_token('admin', is_admin=True)}"}
