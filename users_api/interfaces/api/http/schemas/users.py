"""
===============================================================================
TARJETA CRC — schemas/users.py
===============================================================================

Módulo:
    Schemas HTTP para Users (documentación OpenAPI)

Responsabilidades:
    - Describir el envelope {success, message, data?, errors?} por endpoint.
    - Exponer los campos públicos en camelCase (createdAt, totalUsers, ...).

Colaboradores:
    - domain.entities.UserStatus
    - routers/users.py (response_model)

Notas:
    - Los requests se validan con los modelos de application/validation.py
      (UserCreate / UserUpdate), que también documentan el body en OpenAPI.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from users_api.domain.entities import UserStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------
class UserRes(_CamelModel):
    id: str
    name: str
    email: str
    display_name: str
    age: Optional[int] = None
    status: UserStatus
    created_at: datetime
    updated_at: datetime


class PaginationRes(_CamelModel):
    current_page: int
    total_pages: int
    total_users: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


class StatsRes(_CamelModel):
    total_users: int
    active_users: int
    inactive_users: int
    average_age: float


class DeletedUserRes(BaseModel):
    id: str
    email: str


class UsersListData(BaseModel):
    users: list[UserRes]
    pagination: PaginationRes


class UserData(BaseModel):
    user: UserRes


class DeletedUserData(BaseModel):
    user: DeletedUserRes


class StatsData(BaseModel):
    stats: StatsRes


class _Envelope(BaseModel):
    success: bool
    message: str


class UsersListEnvelope(_Envelope):
    data: UsersListData


class UserEnvelope(_Envelope):
    data: UserData


class DeletedUserEnvelope(_Envelope):
    data: DeletedUserData


class StatsEnvelope(_Envelope):
    data: StatsData


class HealthRes(BaseModel):
    ok: bool
    db: str
    request_id: Optional[str] = None
