"""Shared fixtures: in-memory database and an authenticated API client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from tradejournal.database import create_db_and_tables, get_session
from tradejournal.main import app
from tradejournal.models.user import User
from tradejournal.services.auth import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


def _make_user(session: Session, username: str) -> User:
    user = User(username=username, email=f"{username}@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user(session):
    return _make_user(session, "alice")


@pytest.fixture
def other_user(session):
    return _make_user(session, "bob")


@pytest.fixture
def client(session, user):
    """TestClient authenticated as `user`. Startup hooks are not run."""
    app.dependency_overrides[get_session] = lambda: session
    client = TestClient(app)
    client.headers["Authorization"] = f"Bearer {create_access_token(user.username)}"
    yield client
    app.dependency_overrides.clear()
