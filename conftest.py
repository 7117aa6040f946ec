"""
Pytest Configuration
Configuration file for pytest test runner
"""

import os

# The app reads these at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("APP_TIMEZONE", "America/Santiago")

import pytest
from datetime import datetime, timedelta
from unittest.mock import Mock

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from pilatesflow.models.orm_models import Base, StudioClass, Profile


# Test markers
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "api: API tests"
    )
    config.addinivalue_line(
        "markers", "slow: Slow running tests"
    )


# Test collection
collect_ignore_glob = [
    "alembic/*",
    "*/__pycache__/*",
]


# Fixtures
@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db_session(engine):
    """Real session over an in-memory SQLite database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mock_database():
    """Mock session whose queries and commits fail"""
    mock_session = Mock(spec=Session)
    mock_session.add = Mock()
    mock_session.commit = Mock(side_effect=RuntimeError("connection lost"))
    mock_session.rollback = Mock()
    mock_session.refresh = Mock()
    mock_session.get = Mock(side_effect=RuntimeError("connection lost"))
    mock_session.scalar = Mock(side_effect=RuntimeError("connection lost"))
    mock_session.scalars = Mock(side_effect=RuntimeError("connection lost"))
    mock_session.execute = Mock(side_effect=RuntimeError("connection lost"))
    return mock_session


@pytest.fixture
def make_class(db_session):
    """Insert a class row directly and return its id."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        data = {
            "title": f"Clase {counter['n']}",
            "level": "Básico",
            "status": "published",
            "created_at": datetime(2025, 1, 1) + timedelta(minutes=counter["n"]),
        }
        data.update(fields)
        clase = StudioClass(**data)
        db_session.add(clase)
        db_session.commit()
        return clase.id

    return _make


@pytest.fixture
def make_profile(db_session):
    def _make(email, role="alumna", plan="free"):
        db_session.add(Profile(email=email, role=role, plan=plan))
        db_session.commit()
        return email

    return _make


@pytest.fixture
def client(db_session):
    """TestClient bound to the test session; ``client.login`` sets the caller."""
    from fastapi.testclient import TestClient

    from pilatesflow.main import app
    from pilatesflow.dependencies import get_db_session, get_session_claims
    from pilatesflow.security.session_claims import claims_from_session

    current = {}

    def _override_db():
        yield db_session

    def _override_claims():
        return claims_from_session(current)

    def login(email, role="alumna", plan="free"):
        current.clear()
        current.update({"email": email, "role": role, "plan": plan})

    def logout():
        current.clear()

    app.dependency_overrides[get_db_session] = _override_db
    app.dependency_overrides[get_session_claims] = _override_claims
    with TestClient(app) as c:
        c.login = login
        c.logout = logout
        yield c
    app.dependency_overrides.clear()
