"""Shared fixtures: in-memory database, sessions and API client."""

import os

os.environ.setdefault("PAGEFORGE_DATABASE_URL", "sqlite://")

import uuid
from collections.abc import Generator
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pageforge.database import Base, get_db
from pageforge.main import app
from pageforge.models import Comment, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def sample_user_data() -> dict:
    """Sample user data for testing."""
    return {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "phone": "+10000000000",
        "designation": "Engineer",
        "department_name": "Platform",
        "user_role": "user",
        "is_active": True,
    }


@pytest.fixture
def make_user(db_session: Session, sample_user_data: dict):
    """Factory creating users with distinct contact data and creation times."""
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        data = sample_user_data.copy()
        data.update(
            first_name=f"User{n}",
            last_name=f"Tester{n}",
            email=f"user{n}@example.com",
            phone=f"+1555000{n:04d}",
            created_at=BASE_TIME + timedelta(minutes=n),
        )
        data.update(overrides)
        user = User(**data)
        db_session.add(user)
        db_session.flush()
        return user

    return _make


@pytest.fixture
def make_comment(db_session: Session):
    """Factory creating comments for a user."""

    def _make(author: User, body: str = "A comment") -> Comment:
        comment = Comment(author_id=author.user_id, body=body, created_at=BASE_TIME)
        db_session.add(comment)
        db_session.flush()
        return comment

    return _make


@pytest.fixture
def fixed_uuid() -> uuid.UUID:
    return uuid.UUID("a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d")
