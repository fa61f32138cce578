"""
===============================================================================
TARJETA CRC — users_api/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer el repositorio de Users según Settings (postgres | memory).
  - Componer el UserService (con la política de exposición de errores).
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - users_api.crosscutting.config.Settings
  - users_api.domain.repositories.UserRepository (puerto)
  - users_api.infrastructure.repositories (implementaciones)
  - users_api.application.UserService

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (el lifespan lo invoca).
  - El pool se recibe explícitamente: no hay singleton global de storage.
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from psycopg_pool import ConnectionPool

from .application.user_service import UserService
from .crosscutting.config import Settings
from .domain.repositories import UserRepository
from .infrastructure.repositories import InMemoryUserRepository, PostgresUserRepository


def build_user_repository(
    settings: Settings, pool: Optional[ConnectionPool] = None
) -> UserRepository:
    """
    Repositorio de Users.

    - memory   => InMemoryUserRepository (tests / dev sin DB)
    - postgres => PostgresUserRepository(pool); el pool es obligatorio
    """
    if settings.storage_backend == "memory":
        return InMemoryUserRepository()
    if pool is None:
        raise ValueError("STORAGE_BACKEND=postgres requiere un pool abierto")
    return PostgresUserRepository(pool)


def build_user_service(repository: UserRepository, settings: Settings) -> UserService:
    """UserService; fuera de producción expone el detalle de errores internos."""
    return UserService(
        repository, expose_internal_errors=not settings.is_production()
    )
