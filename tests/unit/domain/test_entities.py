"""
Name: Domain Entity Tests

Responsibilities:
  - Verify public (camelCase) representations and tagged repository results
"""

from __future__ import annotations

import pytest

from users_api.domain.entities import (
    UserStats,
    display_name,
    stats_to_dict,
    user_to_dict,
)
from users_api.domain.repositories import RepoResult, RepoStatus

pytestmark = pytest.mark.unit


def test_user_to_dict_uses_public_field_names(sample_user):
    data = user_to_dict(sample_user)

    assert data == {
        "id": sample_user.id,
        "name": "John Doe",
        "email": "john.doe@example.com",
        "displayName": "John Doe (john.doe@example.com)",
        "age": 30,
        "status": "active",
        "createdAt": "2025-01-01T12:00:00+00:00",
        "updatedAt": "2025-01-01T12:00:00+00:00",
    }


def test_user_is_immutable(sample_user):
    with pytest.raises(AttributeError):
        sample_user.name = "Changed"


def test_stats_to_dict_defaults():
    assert stats_to_dict(UserStats()) == {
        "totalUsers": 0,
        "activeUsers": 0,
        "inactiveUsers": 0,
        "averageAge": 0.0,
    }


def test_repo_result_constructors():
    assert RepoResult.ok(1) == RepoResult(RepoStatus.OK, value=1)
    assert RepoResult.not_found().value is None
    assert RepoResult.duplicate_key().detail == "email"
    assert RepoResult.internal("boom").status is RepoStatus.INTERNAL


def test_display_name_combines_name_and_email(user_factory):
    user = user_factory(name="Ada Lovelace", email="ada@example.com")

    assert display_name(user) == "Ada Lovelace (ada@example.com)"
