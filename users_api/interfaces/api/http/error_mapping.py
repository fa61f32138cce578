"""
===============================================================================
TARJETA CRC — error_mapping.py (ServiceResponse error -> HTTP envelope)
===============================================================================

Responsabilidades:
  - Traducir UserErrorCode a AppHTTPException (status + envelope).
  - Centralizar el mapeo para evitar duplicación en routers.
  - Mantener la capa de aplicación libre de HTTP.

Reglas:
  VALIDATION_ERROR -> 400
  BAD_IDENTIFIER   -> 400
  NOT_FOUND        -> 404
  CONFLICT         -> 409
  INTERNAL_ERROR   -> 500 (también fallback ante un code desconocido)

Colaboradores:
  - application.user_service.ServiceResponse
  - crosscutting.error_responses (factories)
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from users_api.application.usecases.users import UserErrorCode
from users_api.application.user_service import ServiceResponse
from users_api.crosscutting.error_responses import (
    bad_identifier,
    conflict,
    internal_error,
    not_found,
    validation_error,
)


def raise_user_error(response: ServiceResponse) -> NoReturn:
    """Traduce una ServiceResponse fallida a AppHTTPException."""
    if response.code == UserErrorCode.VALIDATION_ERROR:
        raise validation_error(response.message, response.errors)
    if response.code == UserErrorCode.BAD_IDENTIFIER:
        raise bad_identifier(response.message)
    if response.code == UserErrorCode.NOT_FOUND:
        raise not_found(response.message)
    if response.code == UserErrorCode.CONFLICT:
        raise conflict(response.message)

    # INTERNAL_ERROR y fallback
    raise internal_error(response.message, response.errors)
