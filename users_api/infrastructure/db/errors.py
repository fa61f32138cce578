"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del Pool/Conectividad

Responsabilidades:
  - Evitar RuntimeError genéricos.
  - Dar semántica clara: "configuración inválida", "no se pudo conectar", etc.
===============================================================================
"""


class DatabasePoolError(Exception):
    """Base de errores de pool de base de datos."""


class InvalidPoolConfigError(DatabasePoolError):
    """Parámetros de pool inconsistentes (URL vacía, tamaños inválidos)."""


class DatabaseConnectionError(DatabasePoolError):
    """Error al abrir el pool o al adquirir/validar una conexión."""


class SchemaInitializationError(DatabasePoolError):
    """Falló la aplicación del DDL idempotente al arrancar."""
