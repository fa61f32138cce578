"""
===============================================================================
TARJETA CRC — application/user_service.py (User Service facade)
===============================================================================

Clase:
    UserService

Responsabilidades:
    - Recibir inputs crudos (id de path, body, query) y validarlos.
      El identificador se valida PRIMERO: un id inválido nunca llega al storage.
    - Orquestar los use cases (list/get/create/update/delete/stats).
    - Traducir cada resultado al envelope uniforme {success, message, data?, errors?}
      más un `code` (no serializado) que la capa HTTP mapea a status.
    - Ocultar el detalle técnico de errores internos en producción.

Colaboradores:
    - application.validation (validate_*)
    - application.usecases.users (use cases + UserErrorCode)
    - domain.repositories.UserRepository
    - crosscutting.error_responses.ResponseEnvelope

Notas:
    - No lanza excepciones para fallas esperadas: todo vuelve como ServiceResponse.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Mapping, Optional

from ..crosscutting.error_responses import ResponseEnvelope
from ..crosscutting.logger import logger
from ..domain.entities import stats_to_dict, user_to_dict
from ..domain.repositories import UserRepository
from .usecases.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserStatsUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
    UserError,
    UserErrorCode,
)
from .validation import (
    FieldError,
    validate_create_payload,
    validate_identifier,
    validate_pagination,
    validate_update_payload,
)

MSG_LISTED: Final[str] = "Users retrieved successfully"
MSG_RETRIEVED: Final[str] = "User retrieved successfully"
MSG_CREATED: Final[str] = "User created successfully"
MSG_UPDATED: Final[str] = "User updated successfully"
MSG_DELETED: Final[str] = "User deleted successfully"
MSG_STATS: Final[str] = "User statistics retrieved successfully"
MSG_VALIDATION: Final[str] = "Validation error"
MSG_INVALID_QUERY: Final[str] = "Invalid query parameters"
MSG_INVALID_ID: Final[str] = "Invalid ID format"


@dataclass(frozen=True)
class ServiceResponse:
    """
    Resultado uniforme del servicio.

    - success/message/data/errors: forman el envelope público.
    - code: categoría de error (None en éxito); nunca se serializa.
    """

    success: bool
    message: str
    data: Optional[dict[str, Any]] = None
    errors: Optional[list[dict[str, Any]]] = None
    code: Optional[UserErrorCode] = None

    def to_envelope(self) -> ResponseEnvelope:
        return ResponseEnvelope(
            success=self.success,
            message=self.message,
            data=self.data,
            errors=self.errors,
        )


def _ok(message: str, data: dict[str, Any]) -> ServiceResponse:
    return ServiceResponse(success=True, message=message, data=data)


def _field_errors(errors: tuple[FieldError, ...]) -> list[dict[str, Any]]:
    return [e.to_dict() for e in errors]


class UserService:
    """
    Facade del recurso User.

    `expose_internal_errors` controla si el detalle técnico de una falla de
    storage viaja en `errors` (True fuera de producción).
    """

    def __init__(
        self, repository: UserRepository, *, expose_internal_errors: bool = False
    ) -> None:
        self._repository = repository
        self._expose_internal_errors = expose_internal_errors
        self._list_users = ListUsersUseCase(repository)
        self._get_user = GetUserUseCase(repository)
        self._create_user = CreateUserUseCase(repository)
        self._update_user = UpdateUserUseCase(repository)
        self._delete_user = DeleteUserUseCase(repository)
        self._get_stats = GetUserStatsUseCase(repository)

    # ------------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------------

    def list_users(self, query: Mapping[str, Any] | None = None) -> ServiceResponse:
        validated = validate_pagination(query)
        if validated.value is None:
            return self._invalid(
                UserErrorCode.VALIDATION_ERROR, MSG_INVALID_QUERY, validated.errors
            )

        result = self._list_users.execute(validated.value)
        if result.error is not None or result.page_info is None:
            return self._failure(result.error)

        return _ok(
            MSG_LISTED,
            {
                "users": [user_to_dict(u) for u in result.users],
                "pagination": result.page_info.to_dict(),
            },
        )

    def get_user(self, raw_id: Any) -> ServiceResponse:
        user_id = validate_identifier(raw_id)
        if user_id.value is None:
            return self._invalid(UserErrorCode.BAD_IDENTIFIER, MSG_INVALID_ID)

        result = self._get_user.execute(user_id.value)
        if result.error is not None or result.user is None:
            return self._failure(result.error)
        return _ok(MSG_RETRIEVED, {"user": user_to_dict(result.user)})

    def create_user(self, body: Any) -> ServiceResponse:
        validated = validate_create_payload(body)
        if validated.value is None:
            return self._invalid(
                UserErrorCode.VALIDATION_ERROR, MSG_VALIDATION, validated.errors
            )

        result = self._create_user.execute(validated.value)
        if result.error is not None or result.user is None:
            return self._failure(result.error)

        logger.info("user created", extra={"user_id": result.user.id})
        return _ok(MSG_CREATED, {"user": user_to_dict(result.user)})

    def update_user(self, raw_id: Any, body: Any) -> ServiceResponse:
        # 1) Identificador primero (corta antes de validar el body).
        user_id = validate_identifier(raw_id)
        if user_id.value is None:
            return self._invalid(UserErrorCode.BAD_IDENTIFIER, MSG_INVALID_ID)

        # 2) Payload parcial.
        validated = validate_update_payload(body)
        if validated.value is None:
            return self._invalid(
                UserErrorCode.VALIDATION_ERROR, MSG_VALIDATION, validated.errors
            )

        # 3) Use case.
        result = self._update_user.execute(user_id.value, validated.value)
        if result.error is not None or result.user is None:
            return self._failure(result.error)

        logger.info("user updated", extra={"user_id": result.user.id})
        return _ok(MSG_UPDATED, {"user": user_to_dict(result.user)})

    def delete_user(self, raw_id: Any) -> ServiceResponse:
        user_id = validate_identifier(raw_id)
        if user_id.value is None:
            return self._invalid(UserErrorCode.BAD_IDENTIFIER, MSG_INVALID_ID)

        result = self._delete_user.execute(user_id.value)
        if result.error is not None:
            return self._failure(result.error)

        logger.info("user deleted", extra={"user_id": result.user_id})
        return _ok(MSG_DELETED, {"user": {"id": result.user_id, "email": result.email}})

    def get_stats(self) -> ServiceResponse:
        result = self._get_stats.execute()
        if result.error is not None or result.stats is None:
            return self._failure(result.error)
        return _ok(MSG_STATS, {"stats": stats_to_dict(result.stats)})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _invalid(
        code: UserErrorCode, message: str, errors: tuple[FieldError, ...] = ()
    ) -> ServiceResponse:
        return ServiceResponse(
            success=False,
            message=message,
            errors=_field_errors(errors) or None,
            code=code,
        )

    def _failure(self, error: Optional[UserError]) -> ServiceResponse:
        if error is None:
            # Resultado sin valor ni error: contrato roto del repositorio.
            return ServiceResponse(
                success=False,
                message="Internal server error",
                code=UserErrorCode.INTERNAL_ERROR,
            )

        errors: Optional[list[dict[str, Any]]] = _field_errors(error.errors) or None
        if (
            error.code is UserErrorCode.INTERNAL_ERROR
            and self._expose_internal_errors
            and error.detail
        ):
            errors = [{"message": error.detail}]

        return ServiceResponse(
            success=False, message=error.message, errors=errors, code=error.code
        )
