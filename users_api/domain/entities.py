"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (User, UserStats)

Responsabilidades:
    - Definir la estructura central del recurso User (sin infraestructura).
    - Definir el enum de estado y el snapshot de estadísticas.

Colaboradores:
    - domain.repositories: persisten/recuperan estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - interfaces/api: serializan estas entidades a JSON.

Principios:
    - Sin dependencias a DB/FastAPI.
    - Datos planos: el comportamiento (normalización, timestamps, unicidad)
      vive en validadores, casos de uso y repositorios; los derivados
      (display_name) son funciones libres.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class UserStatus(str, Enum):
    """Estado del usuario."""

    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class User:
    """
    Usuario persistido.

    Importante:
      - `id` es un token hex de 24 caracteres asignado por el storage.
      - `updated_at` se refresca en cada mutación exitosa.
    """

    id: str
    name: str
    email: str
    status: UserStatus
    created_at: datetime
    updated_at: datetime
    age: Optional[int] = None


@dataclass(frozen=True)
class UserStats:
    """Resumen agregado de la colección de usuarios."""

    total_users: int = 0
    active_users: int = 0
    inactive_users: int = 0
    average_age: float = 0.0


def display_name(user: User) -> str:
    """Nombre para mostrar: `"John Doe (john.doe@example.com)"`."""
    return f"{user.name} ({user.email})"


def user_to_dict(user: User) -> dict[str, Any]:
    """Representación pública (camelCase, ISO-8601) de un User."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "displayName": display_name(user),
        "age": user.age,
        "status": user.status.value,
        "createdAt": user.created_at.isoformat(),
        "updatedAt": user.updated_at.isoformat(),
    }


def stats_to_dict(stats: UserStats) -> dict[str, Any]:
    return {
        "totalUsers": stats.total_users,
        "activeUsers": stats.active_users,
        "inactiveUsers": stats.inactive_users,
        "averageAge": stats.average_age,
    }
