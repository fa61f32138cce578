"""
CRC — domain/repositories.py

Name
- Domain Repository Interface (Protocol) + tagged repository result

Responsibilities
- Define the persistence contract for Users (port).
- Keep the application layer independent from infrastructure (PostgreSQL, in-memory).
- Report outcomes as an explicit tagged result instead of raising storage errors.

Collaborators
- domain.entities: User, UserStats, UserStatus
- infrastructure.repositories: postgres / in_memory implementations
- application.usecases.users: consumers (branch on RepoStatus)

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- Expected failures (not found, duplicate key) are values, never exceptions.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
- INTERNAL carries a human detail string; the caller decides whether to expose it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, Protocol, Sequence, TypeVar

from .entities import User, UserStats, UserStatus

T = TypeVar("T")


class RepoStatus(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class RepoResult(Generic[T]):
    """
    R: Tagged result returned by every repository operation.

    Contract:
      - OK            => value is set
      - NOT_FOUND     => value is None
      - DUPLICATE_KEY => detail names the violated key
      - INTERNAL      => detail describes the storage failure
    """

    status: RepoStatus
    value: Optional[T] = None
    detail: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "RepoResult[T]":
        return cls(RepoStatus.OK, value=value)

    @classmethod
    def not_found(cls) -> "RepoResult[T]":
        return cls(RepoStatus.NOT_FOUND)

    @classmethod
    def duplicate_key(cls, key: str = "email") -> "RepoResult[T]":
        return cls(RepoStatus.DUPLICATE_KEY, detail=key)

    @classmethod
    def internal(cls, detail: str) -> "RepoResult[T]":
        return cls(RepoStatus.INTERNAL, detail=detail)


@dataclass(frozen=True)
class SortKey:
    """R: One ordering criterion. `field` is a public (camelCase) field name."""

    field: str
    descending: bool = False


@dataclass(frozen=True)
class UserFilter:
    """R: Equality filter over Users (all fields optional, AND-combined)."""

    email: Optional[str] = None
    status: Optional[UserStatus] = None
    exclude_id: Optional[str] = None


@dataclass(frozen=True)
class UserPage:
    items: List[User] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class NewUser:
    """R: Validated payload for insert (id/timestamps assigned by storage)."""

    name: str
    email: str
    status: UserStatus = UserStatus.ACTIVE
    age: Optional[int] = None


class UserRepository(Protocol):
    """
    R: Interface for User persistence.

    Implementations must provide:
      - Unique constraint on email (source of truth for uniqueness)
      - Page + total count over the same filter
      - Single-pass statistics aggregate
    """

    def find_many(
        self,
        user_filter: UserFilter,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> RepoResult[UserPage]:
        """R: Page of users plus the total count matching the same filter."""
        ...

    def find_by_id(self, user_id: str) -> RepoResult[User]:
        """R: Fetch a single user by id (NOT_FOUND if absent)."""
        ...

    def find_one(self, user_filter: UserFilter) -> RepoResult[User]:
        """R: First user matching the filter (used for uniqueness checks)."""
        ...

    def insert(self, new_user: NewUser) -> RepoResult[User]:
        """R: Persist a new user; DUPLICATE_KEY if the email is taken."""
        ...

    def update_by_id(self, user_id: str, changes: dict) -> RepoResult[User]:
        """
        R: Partial update refreshing updated_at.

        `changes` keys are entity attribute names (name, email, age, status).
        """
        ...

    def delete_by_id(self, user_id: str) -> RepoResult[User]:
        """R: Hard delete; returns the removed record."""
        ...

    def aggregate_stats(self) -> RepoResult[UserStats]:
        """R: Totals by status and mean age (users without age excluded)."""
        ...

    def ping(self) -> bool:
        """R: Cheap connectivity check for health endpoints."""
        ...
