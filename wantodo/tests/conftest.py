"""Shared fixtures for the Wantodo test suite."""

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from wantodo import config
from wantodo.crud import TaskStorage
from wantodo.db.repository import SQLTaskRepository
from wantodo.dependencies.services import get_repository
from wantodo.main import app
from wantodo.services.task_service import TaskService

OWNER = "owner-1"
OTHER_OWNER = "owner-2"
TAG_ID = "3f2b8c1e-9a4d-4c7b-8e2f-1a2b3c4d5e6f"
OTHER_TAG_ID = "b7e4a0c2-5d1f-4e8a-9c3b-6f7a8b9c0d1e"


def make_token(owner: str) -> str:
    return jwt.encode({"sub": owner}, config.AUTH_SECRET, algorithm=config.JWT_ALGORITHM)


@pytest.fixture
def json_storage(tmp_path):
    """Create a temporary JSON storage for testing."""
    return TaskStorage(str(tmp_path / "tasks.json"))


@pytest.fixture
def sql_repository():
    """SQL repository on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return SQLTaskRepository(engine)


@pytest.fixture(params=["json_storage", "sql_repository"])
def repository(request):
    """Run a test once against each repository implementation."""
    return request.getfixturevalue(request.param)


@pytest.fixture
def service(repository):
    return TaskService(repository)


@pytest.fixture
def client(json_storage):
    """API client backed by a temporary JSON storage."""
    app.dependency_overrides[get_repository] = lambda: json_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build an Authorization header for an owner."""
    def build(owner: str = OWNER) -> dict:
        return {"Authorization": f"Bearer {make_token(owner)}"}
    return build
