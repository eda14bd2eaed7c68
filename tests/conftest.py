"""Pytest configuration and shared fixtures for HabitLoop tests.

Provides an isolated SQLite database per test, factories for users, loops and
check-ins, and a Flask test client wired to the same kind of database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitloop import create_app
from habitloop.config import TestConfig
from habitloop.infra.database import create_session_factory
from habitloop.models import CheckIn, CheckInStatus, Loop, User

# 2024-01-01 is a Monday; most tests count days from here.
MONDAY = date(2024, 1, 1)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for seeding rows directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories and services expect."""
    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(db_session):
    """Factory for creating users."""

    counter = {"n": 0}

    def _create_user(email: str | None = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash="dummy-hash",
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """A default owner for loops."""
    return user_factory("tester@example.com")


@pytest.fixture
def loop_factory(db_session, user):
    """Factory for creating loops.

    Returns:
        Callable: Function that creates and persists Loop instances
    """

    def _create_loop(
        title: str = "Morning Walk",
        frequency: str = "daily",
        start_date: date = MONDAY,
        visibility: str = "private",
        owner: User | None = None,
        longest_streak: int = 0,
    ) -> Loop:
        owner = owner or user
        loop = Loop(
            owner_id=owner.id,
            title=title,
            frequency=frequency,
            start_date=start_date,
            visibility=visibility,
            longest_streak=longest_streak,
        )
        db_session.add(loop)
        db_session.commit()
        db_session.refresh(loop)
        return loop

    return _create_loop


@pytest.fixture
def checkin_factory(db_session):
    """Factory for creating check-ins directly, bypassing the orchestrator."""

    def _create_checkin(loop: Loop, occurred_on: date, status: str = CheckInStatus.DONE.value) -> CheckIn:
        record = CheckIn(
            loop_id=loop.id,
            user_id=loop.owner_id,
            occurred_on=occurred_on,
            status=status,
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _create_checkin


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Application bound to a temporary data directory and database."""
    monkeypatch.setenv("HABITLOOP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITLOOP_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.delenv("HABITLOOP_CRON_API_KEY", raising=False)

    application = create_app(config=TestConfig())
    yield application
    application.extensions["habitloop"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def auth_client(client):
    """Client with a signed-up, logged-in user."""
    response = client.post(
        "/auth/signup",
        json={"email": "walker@example.com", "password": "correct-horse"},
    )
    assert response.status_code == 201
    return client
