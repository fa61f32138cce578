# users_api/crosscutting/error_responses.py
"""
===============================================================================
MÓDULO: Respuestas estándar (envelope {success, message, data?, errors?})
===============================================================================

Objetivo
--------
Uniformar TODAS las respuestas HTTP (éxito y error) para que:
- El frontend consuma siempre la misma forma
- Los errores de validación viajen como lista [{field, message}]
- El backend pueda correlacionar por request_id

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  ResponseEnvelope + AppHTTPException + handlers

Responsabilidades:
  - Definir catálogo de códigos de error HTTP (ErrorCode)
  - Construir el envelope (ResponseEnvelope)
  - Proveer factories de errores frecuentes
  - Proveer handler (FastAPI) que serializa AppHTTPException como envelope

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores del framework / no controlados)
  - interfaces/api/http/error_mapping.py (UserErrorCode -> status)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .logger import logger


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_IDENTIFIER = "BAD_IDENTIFIER"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ResponseEnvelope(BaseModel):
    """
    Envelope uniforme de respuesta.

    - success: True en 2xx
    - message: mensaje humano
    - data: payload (solo en éxito)
    - errors: lista de detalles (ej: [{"field": "email", "message": "..."}])
    """

    success: bool
    message: str
    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] | None = None


OPENAPI_ERROR_RESPONSES = {
    "400": {"description": "Bad Request", "model": ResponseEnvelope},
    "404": {"description": "Not Found", "model": ResponseEnvelope},
    "409": {"description": "Conflict", "model": ResponseEnvelope},
    "500": {"description": "Internal Server Error", "model": ResponseEnvelope},
}


class AppHTTPException(HTTPException):
    """
    HTTPException con ErrorCode estable y lista opcional de errores.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories de error (helpers)
# ---------------------------------------------------------------------------
def validation_error(
    detail: str = "Validation error", errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def bad_identifier(detail: str = "Invalid ID format") -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.BAD_IDENTIFIER, detail)


def not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def internal_error(
    detail: str = "Internal server error",
    errors: list[dict[str, Any]] | None = None,
) -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail, errors)


def service_unavailable(service: str) -> AppHTTPException:
    return AppHTTPException(
        503,
        ErrorCode.SERVICE_UNAVAILABLE,
        f"Service temporarily unavailable: {service}",
    )


# ---------------------------------------------------------------------------
# Handler FastAPI
# ---------------------------------------------------------------------------
def envelope_response(
    status_code: int, envelope: ResponseEnvelope, headers: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Serializa AppHTTPException como envelope de error."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request rejected",
        extra={"error_code": exc.code.value, "status_code": exc.status_code},
    )
    envelope = ResponseEnvelope(
        success=False,
        message=str(exc.detail),
        errors=exc.errors or None,
    )
    return envelope_response(
        exc.status_code, envelope, headers=getattr(exc, "headers", None)
    )
