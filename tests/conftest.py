"""
Global pytest configuration and fixtures for the Polity API test suite.
"""

import os
from typing import Any, Dict, Generator
from unittest.mock import AsyncMock, MagicMock, Mock

import jwt
import pytest
from fastapi.testclient import TestClient

# Set test environment variables before the settings object is created
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-32-chars"

from polity.core.database import get_db  # noqa: E402
from polity.main import app  # noqa: E402

# Import fixtures from fixture modules
from tests.fixtures.permission_fixtures import *  # noqa: F403, F401, E402

DB_MODELS = {
    "groupmembership": ["find_many", "find_first", "create", "update", "delete"],
    "eventparticipant": ["find_many", "find_first", "create", "update", "delete"],
    "blogblogger": ["find_many", "find_first", "create", "update"],
    "amendment": ["find_unique", "update"],
    "role": ["find_many", "find_first", "create", "delete", "count"],
    "actionright": ["create", "update", "delete", "delete_many"],
    "amendmentrolecollaborator": [
        "find_many",
        "find_first",
        "create",
        "update",
        "delete",
    ],
}


@pytest.fixture
def mock_prisma() -> Mock:
    """
    Mock Prisma client for unit tests that don't need real database.

    Every query method is an AsyncMock; ``find_many`` defaults to no rows,
    ``count`` to zero and single-row lookups to not found. ``tx()`` yields
    the same mock, so writes made in a transaction are asserted on it too.
    """
    mock_db = Mock()
    for model, methods in DB_MODELS.items():
        accessor = getattr(mock_db, model)
        for method in methods:
            default = {"find_many": [], "count": 0}.get(method)
            setattr(accessor, method, AsyncMock(return_value=default))
    mock_db.tx = MagicMock()
    mock_db.tx.return_value.__aenter__.return_value = mock_db
    return mock_db


@pytest.fixture
def test_jwt_secret() -> str:
    """JWT secret for generating test tokens."""
    return "test-secret-key-for-testing-only-32-chars"


@pytest.fixture
def test_user_id() -> str:
    """Standard test user ID."""
    return "test-user-id-123"


@pytest.fixture
def valid_jwt_payload(test_user_id: str) -> Dict[str, Any]:
    """Valid JWT payload for testing."""
    return {
        "sub": test_user_id,
        "email": "test@example.com",
        "aud": "authenticated",
        "iss": "polity",
    }


@pytest.fixture
def valid_jwt_token(test_jwt_secret: str, valid_jwt_payload: Dict[str, Any]) -> str:
    """Generate a valid JWT token for testing."""
    return jwt.encode(valid_jwt_payload, test_jwt_secret, algorithm="HS256")


@pytest.fixture
def invalid_jwt_token() -> str:
    """Generate a JWT token signed with the wrong secret."""
    return jwt.encode(
        {"sub": "someone"}, "wrong-secret-key-for-testing-only-32", algorithm="HS256"
    )


@pytest.fixture
def auth_headers(valid_jwt_token: str) -> Dict[str, str]:
    """Generate authentication headers with valid JWT token."""
    return {"Authorization": f"Bearer {valid_jwt_token}"}


@pytest.fixture
def client(mock_prisma: Mock) -> Generator[TestClient, None, None]:
    """
    FastAPI test client wired to the mock database.

    The client is not entered as a context manager, so the lifespan (and
    with it the real Prisma connection) never runs.
    """
    app.dependency_overrides[get_db] = lambda: mock_prisma
    yield TestClient(app)
    app.dependency_overrides.clear()
