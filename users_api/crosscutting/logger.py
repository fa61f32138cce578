"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON)
- Correlacionable (request_id / method / path)
- Segura: credenciales de DB redactadas, emails enmascarados

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON (una línea por evento)
  - Enriquecer con contexto (request_id, method, path)
  - Redactar secretos, enmascarar emails de usuarios y recortar strings largos

Colaboradores:
  - users_api/context.py (ContextVars)
  - crosscutting/config.py (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

# Atributos estándar de LogRecord: todo lo demás es "extra".
_RESERVED_KEYS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_REDACTED = "***REDACTADO***"
_SECRET_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "token", "authorization", "database_url", "dsn", "conninfo"}
)
_EMAIL_KEYS: frozenset[str] = frozenset({"email", "new_email", "old_email"})
_MAX_STR = 2_000


def mask_email(value: str) -> str:
    """`john.doe@example.com` -> `j***@example.com`."""
    local, sep, domain = value.partition("@")
    if not sep:
        return _REDACTED
    return f"{local[:1]}***@{domain}"


def _sanitize(key: str, value: Any) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return _REDACTED
    if lowered in _EMAIL_KEYS and isinstance(value, str):
        return mask_email(value)
    if isinstance(value, str) and len(value) > _MAX_STR:
        return value[:_MAX_STR] + "…(truncado)"
    return value


class JSONFormatter(logging.Formatter):
    """Convierte LogRecord -> JSON, con contexto de request y stacktrace."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for key, value in record.__dict__.items():
            if key not in _RESERVED_KEYS:
                payload[key] = _sanitize(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str = "users-api") -> logging.Logger:
    """
    Crea y configura el logger del servicio (idempotente ante reimports).

    Nivel y formato salen de Settings; con Settings inválidos se usan los
    defaults (INFO + JSON) y el error se reporta al arrancar la app.
    """
    from .config import get_settings

    level, use_json = "INFO", True
    try:
        settings = get_settings()
        level, use_json = settings.log_level.upper(), settings.log_json
    except ValidationError:
        pass

    log = logging.getLogger(name)
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
