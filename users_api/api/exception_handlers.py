"""
===============================================================================
TARJETA CRC — users_api/api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones a respuestas HTTP con envelope {success, message, errors?}.
  - Centralizar logging de errores con request_id.
  - Evitar filtrar detalles internos en producción.

Patrones aplicados:
  - Exception Mapping (Presentation Layer).
  - Fail-safe: cualquier excepción no tipada -> 500 INTERNAL_ERROR (con logging).

Colaboradores:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - infrastructure.db.errors: DatabasePoolError
  - crosscutting.config.get_settings (para decidir nivel de detalle)
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    ResponseEnvelope,
    app_exception_handler,
    envelope_response,
)
from ..crosscutting.logger import logger
from ..infrastructure.db.errors import DatabasePoolError


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _field_of(err: dict) -> str:
    # json_invalid trae la posición del error como loc ("body", 12).
    if err.get("type") == "json_invalid":
        return "body"
    return ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de parseo del framework (path/query/body) -> 400 envelope."""
    errors = [
        {"field": _field_of(err), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    app_exc = AppHTTPException(
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Validation error",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException genérica (404 de ruta, 405, ...) con el mismo envelope."""
    envelope = ResponseEnvelope(success=False, message=str(exc.detail))
    return envelope_response(
        exc.status_code, envelope, headers=getattr(exc, "headers", None)
    )


async def database_pool_error_handler(
    request: Request, exc: DatabasePoolError
) -> JSONResponse:
    request_id = _request_id_from(request)
    logger.error(
        "Error de pool DB",
        extra={"request_id": request_id, "error": str(exc)},
    )
    app_exc = AppHTTPException(
        status_code=503,
        code=ErrorCode.SERVICE_UNAVAILABLE,
        detail="Service temporarily unavailable: database",
    )
    return await app_exception_handler(request, app_exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler para excepciones no tipadas.

    - Log completo (stacktrace).
    - En producción la respuesta no incluye el detalle.
    """
    request_id = _request_id_from(request)
    settings = getattr(request.app.state, "settings", None) or get_settings()

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    errors = None if settings.is_production() else [{"message": str(exc)}]
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail="Internal server error",
        errors=errors,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Importante:
      - AppHTTPException se registra antes que la HTTPException base.
      - Exception genérica se registra al final como fallback.
    """
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(DatabasePoolError, database_pool_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
