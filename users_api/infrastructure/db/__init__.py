"""Infra DB: pool explícito + schema idempotente + errores tipados."""

from .errors import (
    DatabaseConnectionError,
    DatabasePoolError,
    InvalidPoolConfigError,
    SchemaInitializationError,
)
from .pool import close_pool, open_pool, pool_scope
from .schema import ensure_schema

__all__ = [
    "open_pool",
    "close_pool",
    "pool_scope",
    "ensure_schema",
    "DatabasePoolError",
    "InvalidPoolConfigError",
    "DatabaseConnectionError",
    "SchemaInitializationError",
]
