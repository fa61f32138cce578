"""
===============================================================================
USER USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    User Use Case Results

Business Goal:
    Proveer tipos consistentes de resultados y errores para los casos de uso
    del recurso User (CRUD + estadísticas).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar excepciones.
    - El facade (UserService) traduce estos resultados al envelope uniforme
      {success, message, data?, errors?} y la capa HTTP mapea el code a status.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    user_results models (module)

Responsibilities:
    - Definir UserErrorCode como conjunto estable de categorías de error.
    - Definir UserError como contrato mínimo de error.
    - Definir DTOs de resultados por caso de uso:
        * UserResult, ListUsersResult, DeleteUserResult, UserStatsResult

Collaborators:
    - domain.entities: User, UserStats
    - crosscutting.pagination: PageInfo
    - application.validation: FieldError
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, List, Optional

from ....crosscutting.pagination import PageInfo
from ....domain.entities import User, UserStats
from ...validation import FieldError

MSG_NOT_FOUND: Final[str] = "User not found"
MSG_CONFLICT: Final[str] = "User with this email already exists"
MSG_INTERNAL: Final[str] = "Internal server error"


class UserErrorCode(str, Enum):
    """
    Categorías de error para casos de uso de User.

    Códigos:
      - VALIDATION_ERROR: payload o query inválidos.
      - BAD_IDENTIFIER: id con formato inválido (nunca llega al storage).
      - NOT_FOUND: el usuario no existe.
      - CONFLICT: email ya registrado (pre-check o unique constraint).
      - INTERNAL_ERROR: falla inesperada del storage.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_IDENTIFIER = "BAD_IDENTIFIER"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class UserError:
    """
    Error de caso de uso para User.

    Campos:
      - code: UserErrorCode (categoría estable)
      - message: mensaje humano
      - errors: detalle por campo (solo validación)
      - detail: detalle técnico de storage (solo INTERNAL_ERROR; el facade
        decide si se expone)
    """

    code: UserErrorCode
    message: str
    errors: tuple[FieldError, ...] = ()
    detail: Optional[str] = None


def not_found_error() -> UserError:
    return UserError(code=UserErrorCode.NOT_FOUND, message=MSG_NOT_FOUND)


def conflict_error() -> UserError:
    return UserError(code=UserErrorCode.CONFLICT, message=MSG_CONFLICT)


def internal_error(detail: Optional[str]) -> UserError:
    return UserError(
        code=UserErrorCode.INTERNAL_ERROR, message=MSG_INTERNAL, detail=detail
    )


@dataclass
class UserResult:
    user: Optional[User] = None
    error: Optional[UserError] = None


@dataclass
class ListUsersResult:
    users: List[User] = field(default_factory=list)
    page_info: Optional[PageInfo] = None
    error: Optional[UserError] = None


@dataclass
class DeleteUserResult:
    """Resultado de borrado: se devuelve el par (id, email) del registro eliminado."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    error: Optional[UserError] = None


@dataclass
class UserStatsResult:
    stats: Optional[UserStats] = None
    error: Optional[UserError] = None
