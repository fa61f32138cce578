"""
Name: Object Id Generator Tests
"""

from __future__ import annotations

import re

import pytest

from users_api.infrastructure.repositories import new_object_id

pytestmark = pytest.mark.unit


def test_object_id_is_24_lowercase_hex():
    assert re.fullmatch(r"[0-9a-f]{24}", new_object_id())


def test_object_id_encodes_timestamp_prefix():
    assert new_object_id(timestamp=0x65A1B2C3).startswith("65a1b2c3")


def test_object_ids_are_unique_within_process():
    ids = {new_object_id(timestamp=1_700_000_000) for _ in range(1000)}

    assert len(ids) == 1000
