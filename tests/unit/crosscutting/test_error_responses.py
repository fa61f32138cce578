"""
Name: Response Envelope Tests
"""

from __future__ import annotations

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest

from users_api.crosscutting.error_responses import (
    ErrorCode,
    ResponseEnvelope,
    app_exception_handler,
    bad_identifier,
    conflict,
    envelope_response,
    internal_error,
    not_found,
    service_unavailable,
    validation_error,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "exc, status, code",
    [
        (validation_error(), 400, ErrorCode.VALIDATION_ERROR),
        (bad_identifier(), 400, ErrorCode.BAD_IDENTIFIER),
        (not_found("User not found"), 404, ErrorCode.NOT_FOUND),
        (conflict("dup"), 409, ErrorCode.CONFLICT),
        (internal_error(), 500, ErrorCode.INTERNAL_ERROR),
        (service_unavailable("db"), 503, ErrorCode.SERVICE_UNAVAILABLE),
    ],
)
def test_factories_map_status_and_code(exc, status, code):
    assert exc.status_code == status
    assert exc.code is code


def test_envelope_response_omits_none_fields():
    response = envelope_response(
        404, ResponseEnvelope(success=False, message="User not found")
    )

    assert response.status_code == 404
    assert json.loads(response.body) == {"success": False, "message": "User not found"}


def test_validation_error_carries_field_errors():
    errors = [{"field": "email", "message": "Email is required"}]

    exc = validation_error("Validation error", errors)

    assert exc.detail == "Validation error"
    assert exc.errors == errors


def test_app_exception_handler_logs_error_code(caplog):
    request = SimpleNamespace(state=SimpleNamespace(request_id="req-1"))

    with caplog.at_level(logging.INFO, logger="users-api"):
        response = asyncio.run(app_exception_handler(request, conflict("dup")))

    assert response.status_code == 409
    assert json.loads(response.body) == {"success": False, "message": "dup"}
    record = next(r for r in caplog.records if r.getMessage() == "request rejected")
    assert record.error_code == "CONFLICT"
    assert record.status_code == 409
