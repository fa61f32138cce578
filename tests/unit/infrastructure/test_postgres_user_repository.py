"""
Name: PostgreSQL User Repository Tests

Responsibilities:
  - Verify SQL parameters, row mapping and error translation with a mocked pool
  - No real database required
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from psycopg import errors as pg_errors

from users_api.domain.entities import UserStatus
from users_api.domain.repositories import (
    NewUser,
    RepoStatus,
    SortKey,
    UserFilter,
)
from users_api.infrastructure.repositories import PostgresUserRepository

pytestmark = pytest.mark.unit

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
USER_ID = "65a1b2c3d4e5f60718293a4b"
ROW = (USER_ID, "John Doe", "john@example.com", 30, "active", NOW, NOW)


def _cursor(*, one=None, many=None) -> MagicMock:
    cursor = MagicMock()
    cursor.fetchone.return_value = one
    cursor.fetchall.return_value = many or []
    return cursor


def _pool_with(conn: MagicMock) -> MagicMock:
    pool = MagicMock()
    pool.connection.return_value.__enter__.return_value = conn
    pool.connection.return_value.__exit__.return_value = False
    return pool


def _repo(*, execute_side_effect=None, cursor=None):
    conn = MagicMock()
    if execute_side_effect is not None:
        conn.execute.side_effect = execute_side_effect
    else:
        conn.execute.return_value = cursor or _cursor()
    return PostgresUserRepository(_pool_with(conn)), conn


def _sql(conn: MagicMock, call_index: int = 0) -> str:
    return " ".join(conn.execute.call_args_list[call_index].args[0].split())


# =============================================================================
# Reads
# =============================================================================


def test_find_by_id_maps_row():
    repo, conn = _repo(cursor=_cursor(one=ROW))

    result = repo.find_by_id(USER_ID)

    assert result.status is RepoStatus.OK
    user = result.value
    assert (user.id, user.name, user.email, user.age) == (
        USER_ID,
        "John Doe",
        "john@example.com",
        30,
    )
    assert user.status is UserStatus.ACTIVE
    assert conn.execute.call_args.args[1] == (USER_ID,)


def test_find_by_id_missing_row_is_not_found():
    repo, _ = _repo(cursor=_cursor(one=None))

    assert repo.find_by_id(USER_ID).status is RepoStatus.NOT_FOUND


def test_find_one_builds_parameterized_where():
    repo, conn = _repo(cursor=_cursor(one=None))

    repo.find_one(UserFilter(email="john@example.com", exclude_id=USER_ID))

    assert "WHERE email = %s AND id <> %s" in _sql(conn)
    assert conn.execute.call_args.args[1] == ("john@example.com", USER_ID)


def test_find_many_runs_page_and_count_reads():
    def execute(query, params=()):
        if "COUNT(*)" in query:
            return _cursor(one=(7,))
        return _cursor(many=[ROW])

    repo, conn = _repo(execute_side_effect=execute)

    result = repo.find_many(
        UserFilter(status=UserStatus.ACTIVE),
        (SortKey("status", descending=True), SortKey("createdAt")),
        offset=10,
        limit=5,
    )

    assert result.status is RepoStatus.OK
    assert result.value.total == 7
    assert [u.id for u in result.value.items] == [USER_ID]
    assert conn.execute.call_count == 2

    page_call = next(
        c for c in conn.execute.call_args_list if "COUNT(*)" not in c.args[0]
    )
    page_sql = " ".join(page_call.args[0].split())
    assert "ORDER BY status DESC, created_at ASC, id ASC" in page_sql
    assert page_call.args[1] == ("active", 5, 10)


def test_find_many_count_failure_is_internal():
    def execute(query, params=()):
        if "COUNT(*)" in query:
            raise RuntimeError("count exploded")
        return _cursor(many=[ROW])

    repo, _ = _repo(execute_side_effect=execute)

    result = repo.find_many(UserFilter(), (SortKey("name"),), 0, 10)

    assert result.status is RepoStatus.INTERNAL
    assert "count exploded" in result.detail


# =============================================================================
# Writes
# =============================================================================


def test_insert_returns_created_user():
    repo, conn = _repo(cursor=_cursor(one=ROW))

    result = repo.insert(NewUser(name="John Doe", email="john@example.com", age=30))

    assert result.status is RepoStatus.OK
    params = conn.execute.call_args.args[1]
    assert len(params[0]) == 24
    assert params[1:5] == ("John Doe", "john@example.com", 30, "active")
    assert params[5] == params[6]


def test_insert_unique_violation_is_duplicate_key():
    repo, _ = _repo(execute_side_effect=pg_errors.UniqueViolation("duplicate key"))

    result = repo.insert(NewUser(name="John Doe", email="john@example.com"))

    assert result.status is RepoStatus.DUPLICATE_KEY
    assert result.detail == "email"


def test_insert_check_violation_is_internal():
    repo, _ = _repo(execute_side_effect=pg_errors.CheckViolation("users_age_range_check"))

    result = repo.insert(NewUser(name="John Doe", email="john@example.com", age=999))

    assert result.status is RepoStatus.INTERNAL
    assert "users_age_range_check" in result.detail


def test_update_sets_only_given_columns_and_refreshes_updated_at():
    repo, conn = _repo(cursor=_cursor(one=ROW))

    result = repo.update_by_id(USER_ID, {"name": "Renamed", "status": UserStatus.INACTIVE})

    assert result.status is RepoStatus.OK
    sql = _sql(conn)
    assert "SET name = %s, status = %s, updated_at = GREATEST(now(), created_at)" in sql
    assert conn.execute.call_args.args[1] == ("Renamed", "inactive", USER_ID)


def test_update_missing_row_is_not_found():
    repo, _ = _repo(cursor=_cursor(one=None))

    assert repo.update_by_id(USER_ID, {"age": 31}).status is RepoStatus.NOT_FOUND


def test_update_unknown_column_never_hits_database():
    repo, conn = _repo()

    result = repo.update_by_id(USER_ID, {"created_at": NOW})

    assert result.status is RepoStatus.INTERNAL
    conn.execute.assert_not_called()


def test_update_unique_violation_is_duplicate_key():
    repo, _ = _repo(execute_side_effect=pg_errors.UniqueViolation("duplicate key"))

    result = repo.update_by_id(USER_ID, {"email": "taken@example.com"})

    assert result.status is RepoStatus.DUPLICATE_KEY


def test_delete_returns_removed_row():
    repo, conn = _repo(cursor=_cursor(one=ROW))

    result = repo.delete_by_id(USER_ID)

    assert result.value.email == "john@example.com"
    assert _sql(conn).startswith("DELETE FROM users WHERE id = %s RETURNING")


# =============================================================================
# Aggregates / health
# =============================================================================


def test_aggregate_stats_maps_single_row():
    repo, conn = _repo(cursor=_cursor(one=(3, 2, 1, Decimal("30.5"))))

    stats = repo.aggregate_stats().value

    assert (stats.total_users, stats.active_users, stats.inactive_users) == (3, 2, 1)
    assert stats.average_age == 30.5
    assert conn.execute.call_count == 1


def test_aggregate_stats_without_ages_is_zero():
    repo, _ = _repo(cursor=_cursor(one=(0, 0, 0, None)))

    assert repo.aggregate_stats().value.average_age == 0.0


def test_generic_failure_is_internal():
    repo, _ = _repo(execute_side_effect=RuntimeError("connection reset"))

    result = repo.aggregate_stats()

    assert result.status is RepoStatus.INTERNAL
    assert "connection reset" in result.detail


def test_ping_reports_connectivity():
    repo, _ = _repo(cursor=_cursor(one=(1,)))
    assert repo.ping() is True

    broken, _ = _repo(execute_side_effect=RuntimeError("down"))
    assert broken.ping() is False
