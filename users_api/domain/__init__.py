"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    User,
    UserStats,
    UserStatus,
    display_name,
    stats_to_dict,
    user_to_dict,
)
from .repositories import (
    NewUser,
    RepoResult,
    RepoStatus,
    SortKey,
    UserFilter,
    UserPage,
    UserRepository,
)

__all__ = [
    # Entities
    "User",
    "UserStats",
    "UserStatus",
    "display_name",
    "user_to_dict",
    "stats_to_dict",
    # Repository Interface (Port)
    "UserRepository",
    "RepoResult",
    "RepoStatus",
    "SortKey",
    "UserFilter",
    "UserPage",
    "NewUser",
]
