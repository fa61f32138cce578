"""
Name: In-Memory User Repository Tests

Responsibilities:
  - Verify the storage contract (unique email, constraints, ordering)
  - Verify tagged results for every operation
"""

from __future__ import annotations

import pytest

from users_api.domain.entities import UserStatus
from users_api.domain.repositories import (
    NewUser,
    RepoStatus,
    SortKey,
    UserFilter,
)
from users_api.infrastructure.repositories import InMemoryUserRepository

pytestmark = pytest.mark.unit

NEWEST_FIRST = (SortKey("createdAt", descending=True),)


def test_insert_assigns_id_and_timestamps(memory_repository):
    result = memory_repository.insert(NewUser(name="John Doe", email="john@example.com"))

    assert result.status is RepoStatus.OK
    user = result.value
    assert len(user.id) == 24
    assert user.status is UserStatus.ACTIVE
    assert user.created_at == user.updated_at
    assert user.created_at.tzinfo is not None


def test_insert_duplicate_email_is_duplicate_key(memory_repository):
    memory_repository.insert(NewUser(name="John Doe", email="john@example.com"))

    result = memory_repository.insert(NewUser(name="Other", email="john@example.com"))

    assert result.status is RepoStatus.DUPLICATE_KEY
    assert result.detail == "email"


def test_insert_enforces_check_constraints(memory_repository):
    result = memory_repository.insert(
        NewUser(name="John Doe", email="john@example.com", age=151)
    )

    assert result.status is RepoStatus.INTERNAL
    assert "users_age_range_check" in result.detail


def test_insert_rejects_email_longer_than_column(memory_repository):
    result = memory_repository.insert(
        NewUser(name="John Doe", email="a" * 250 + "@example.com")
    )

    assert result.status is RepoStatus.INTERNAL
    assert "VARCHAR(254)" in result.detail


def test_find_by_id_and_not_found(memory_repository, sample_user):
    repo = InMemoryUserRepository([sample_user])

    assert repo.find_by_id(sample_user.id).value == sample_user
    assert repo.find_by_id("0" * 24).status is RepoStatus.NOT_FOUND


def test_find_one_supports_email_status_and_exclude_id(sample_users):
    repo = InMemoryUserRepository(sample_users)
    alice = sample_users[0]

    assert repo.find_one(UserFilter(email=alice.email)).value == alice
    assert (
        repo.find_one(UserFilter(email=alice.email, exclude_id=alice.id)).status
        is RepoStatus.NOT_FOUND
    )
    assert repo.find_one(UserFilter(status=UserStatus.INACTIVE)).value == sample_users[2]


def test_find_many_returns_page_and_total(sample_users):
    repo = InMemoryUserRepository(sample_users)

    result = repo.find_many(UserFilter(), NEWEST_FIRST, offset=1, limit=1)

    assert result.value.total == 3
    assert [u.name for u in result.value.items] == ["Bob Jones"]


def test_find_many_sorts_nulls_last_ascending_and_first_descending(sample_users):
    repo = InMemoryUserRepository(sample_users)

    ascending = repo.find_many(UserFilter(), (SortKey("age"),), 0, 10).value.items
    descending = repo.find_many(
        UserFilter(), (SortKey("age", descending=True),), 0, 10
    ).value.items

    assert [u.age for u in ascending] == [25, 35, None]
    assert [u.age for u in descending] == [None, 35, 25]


def test_find_many_multi_key_sort(sample_users):
    repo = InMemoryUserRepository(sample_users)

    items = repo.find_many(
        UserFilter(),
        (SortKey("status", descending=True), SortKey("name")),
        0,
        10,
    ).value.items

    assert [u.name for u in items] == ["Carol White", "Alice Smith", "Bob Jones"]


def test_update_refreshes_updated_at_and_keeps_created_at(sample_user):
    repo = InMemoryUserRepository([sample_user])

    result = repo.update_by_id(sample_user.id, {"name": "Renamed", "status": UserStatus.INACTIVE})

    updated = result.value
    assert updated.name == "Renamed"
    assert updated.status is UserStatus.INACTIVE
    assert updated.created_at == sample_user.created_at
    assert updated.updated_at >= updated.created_at


def test_update_email_collision_is_duplicate_key(sample_users):
    repo = InMemoryUserRepository(sample_users)

    result = repo.update_by_id(sample_users[1].id, {"email": sample_users[0].email})

    assert result.status is RepoStatus.DUPLICATE_KEY
    assert repo.find_by_id(sample_users[1].id).value == sample_users[1]


def test_update_rechecks_constraints(sample_user):
    repo = InMemoryUserRepository([sample_user])

    result = repo.update_by_id(sample_user.id, {"name": "J"})

    assert result.status is RepoStatus.INTERNAL
    assert repo.find_by_id(sample_user.id).value.name == sample_user.name


def test_update_rejects_unknown_columns(sample_user):
    repo = InMemoryUserRepository([sample_user])

    result = repo.update_by_id(sample_user.id, {"id": "x" * 24})

    assert result.status is RepoStatus.INTERNAL


def test_update_missing_user_is_not_found(memory_repository):
    result = memory_repository.update_by_id("0" * 24, {"age": 1})

    assert result.status is RepoStatus.NOT_FOUND


def test_delete_returns_record_then_not_found(sample_user):
    repo = InMemoryUserRepository([sample_user])

    assert repo.delete_by_id(sample_user.id).value == sample_user
    assert repo.delete_by_id(sample_user.id).status is RepoStatus.NOT_FOUND
    assert repo.find_by_id(sample_user.id).status is RepoStatus.NOT_FOUND


def test_aggregate_stats(sample_users):
    stats = InMemoryUserRepository(sample_users).aggregate_stats().value

    assert (stats.total_users, stats.active_users, stats.inactive_users) == (3, 2, 1)
    assert stats.average_age == 30.0


def test_aggregate_stats_without_ages_is_zero(user_factory):
    repo = InMemoryUserRepository([user_factory(age=None)])

    assert repo.aggregate_stats().value.average_age == 0.0


def test_ping(memory_repository):
    assert memory_repository.ping() is True
