"""
===============================================================================
TARJETA CRC — users_api/interfaces/api/http/routers/users.py
===============================================================================

Class/Module:
    Users Router

Responsibilities:
    - Exponer el CRUD + stats de Users.
    - Convertir requests HTTP -> inputs crudos del UserService.
    - Traducir ServiceResponse -> envelope HTTP (status según UserErrorCode).

Collaborators:
    - users_api.application.user_service.UserService
    - users_api.container.get_user_service (DI)
    - error_mapping.raise_user_error
    - schemas.users (DTOs OpenAPI)

Patterns:
    - Controller / Router
    - Adapter (HTTP -> Service)
    - Error Mapping

Notas:
    - `/users/stats` se declara antes que `/users/{user_id}`.
    - El body llega como JSON sin tipar (`Body`) y lo valida UserService con
      UserCreate / UserUpdate, así se reportan todos los errores juntos.
      JSON malformado => RequestValidationError => 400 envelope.
    - Handlers síncronos: FastAPI los ejecuta en el threadpool (IO bloqueante).
===============================================================================
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from users_api.application.user_service import ServiceResponse, UserService
from users_api.application.validation import UserCreate, UserUpdate
from users_api.crosscutting.error_responses import envelope_response

from ..dependencies import get_user_service
from ..error_mapping import raise_user_error
from ..schemas.users import (
    DeletedUserEnvelope,
    StatsEnvelope,
    UserEnvelope,
    UsersListEnvelope,
)

router = APIRouter(prefix="/users", tags=["users"])


# =============================================================================
# Helpers internos
# =============================================================================


def _respond(response: ServiceResponse, *, status_code: int = 200) -> JSONResponse:
    """Éxito => envelope con status_code; falla => AppHTTPException."""
    if not response.success:
        raise_user_error(response)
    return envelope_response(status_code, response.to_envelope())


def _json_body(model: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI: documenta el body con el modelo que lo valida."""
    schema = model.model_json_schema(ref_template="#/components/schemas/{model}")
    schema.pop("$defs", None)
    return {"requestBody": {"content": {"application/json": {"schema": schema}}}}


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=UsersListEnvelope)
def list_users(
    page: Optional[str] = Query(None, description="Página (>= 1, default 1)"),
    limit: Optional[str] = Query(None, description="Tamaño de página (1..100, default 10)"),
    sort: Optional[str] = Query(
        None, description="Campos de orden, '-' = descendente (default -createdAt)"
    ),
    status: Optional[str] = Query(None, description="Filtro: active | inactive"),
    service: UserService = Depends(get_user_service),
):
    query = {
        key: value
        for key, value in (
            ("page", page),
            ("limit", limit),
            ("sort", sort),
            ("status", status),
        )
        if value is not None
    }
    return _respond(service.list_users(query))


@router.get("/stats", response_model=StatsEnvelope)
def get_user_stats(service: UserService = Depends(get_user_service)):
    return _respond(service.get_stats())


@router.get("/{user_id}", response_model=UserEnvelope)
def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return _respond(service.get_user(user_id))


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=201,
    openapi_extra=_json_body(UserCreate),
)
def create_user(
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    return _respond(service.create_user(payload), status_code=201)


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    openapi_extra=_json_body(UserUpdate),
)
def update_user(
    user_id: str,
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    return _respond(service.update_user(user_id, payload))


@router.delete("/{user_id}", response_model=DeletedUserEnvelope)
def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    return _respond(service.delete_user(user_id))
