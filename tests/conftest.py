"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (APP_ENV=test, in-memory storage, no .env)
  - Provide reusable fixtures: users, repositories, service, HTTP client

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - users_api.domain: entities and repository protocol

Notes:
  - Fixtures are auto-discovered by pytest
  - Repository fixtures are per-test (fresh in-memory state)
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_JSON", "false")

from users_api.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from users_api.application.user_service import UserService  # noqa: E402
from users_api.domain.entities import User, UserStatus  # noqa: E402
from users_api.domain.repositories import UserRepository  # noqa: E402
from users_api.infrastructure.repositories import InMemoryUserRepository  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Domain Entity Fixtures
# ============================================================================

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_user(
    *,
    user_id: str = "65a1b2c3d4e5f60718293a4b",
    name: str = "John Doe",
    email: str = "john.doe@example.com",
    age: int | None = 30,
    status: UserStatus = UserStatus.ACTIVE,
    created_at: datetime = BASE_TIME,
) -> User:
    """R: Factory for User entities with sensible defaults."""
    return User(
        id=user_id,
        name=name,
        email=email,
        age=age,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def sample_user() -> User:
    return make_user()


@pytest.fixture
def sample_users() -> list[User]:
    """R: Three users created one minute apart (2 active, 1 inactive)."""
    return [
        make_user(
            user_id=f"65a1b2c3d4e5f60718293a4{i}",
            name=name,
            email=f"{name.split()[0].lower()}@example.com",
            age=age,
            status=status,
            created_at=BASE_TIME + timedelta(minutes=i),
        )
        for i, (name, age, status) in enumerate(
            [
                ("Alice Smith", 25, UserStatus.ACTIVE),
                ("Bob Jones", 35, UserStatus.ACTIVE),
                ("Carol White", None, UserStatus.INACTIVE),
            ]
        )
    ]


# ============================================================================
# Repository / Service Fixtures
# ============================================================================


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def mock_repository() -> Mock:
    """R: Mock that enforces the UserRepository interface."""
    return Mock(spec=UserRepository)


@pytest.fixture
def user_service(memory_repository: InMemoryUserRepository) -> UserService:
    return UserService(memory_repository, expose_internal_errors=True)


@pytest.fixture
def user_factory():
    """R: Expose make_user to tests without importing conftest."""
    return make_user
