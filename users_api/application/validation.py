"""
===============================================================================
TARJETA CRC — application/validation.py (Field Validators)
===============================================================================

Módulo:
    Modelos pydantic de entrada (alta, actualización, listado) + adaptadores
    `validate_*` que traducen `pydantic.ValidationError` a `{field, message}`.

Responsabilidades:
    - Validar y normalizar payloads de creación/actualización de User.
    - Validar el token identificador (24 hex) sin tocar el storage.
    - Validar page/limit/sort/status y producir PaginationParams.
    - Política collect-all-errors: se reportan TODAS las reglas violadas
      (incluso varias sobre el mismo campo), en orden de campo/regla.
    - Política strip-unknown: `extra="ignore"` descarta claves desconocidas.

Colaboradores:
    - domain.entities.UserStatus
    - domain.repositories.SortKey
    - application.user_service (consumidor)

Notas:
    - Las reglas viven en los modelos (Field constraints + validators); los
      mensajes se resuelven por (campo, tipo de error pydantic).
    - Funciones puras: sin IO, sin logging, sin excepciones para input inválido.
===============================================================================
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Annotated, Any, Final, Generic, Mapping, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from ..domain.entities import UserStatus
from ..domain.repositories import SortKey

T = TypeVar("T")

# Mismo lenguaje que ^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$, sin cuantificadores
# anidados ambiguos (evita backtracking exponencial).
EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII
)
OBJECT_ID_PATTERN: Final[str] = r"^[0-9a-fA-F]{24}$"

NAME_MIN_LENGTH: Final[int] = 2
NAME_MAX_LENGTH: Final[int] = 50
# Mismo límite que la columna users.email (VARCHAR(254)).
EMAIL_MAX_LENGTH: Final[int] = 254
AGE_MIN: Final[int] = 0
AGE_MAX: Final[int] = 150

DEFAULT_PAGE: Final[int] = 1
# Mayor entero "seguro" (2^53 - 1): (page - 1) * limit siempre entra en BIGINT.
MAX_PAGE: Final[int] = 2**53 - 1
DEFAULT_LIMIT: Final[int] = 10
MAX_LIMIT: Final[int] = 100
DEFAULT_SORT: Final[str] = "-createdAt"
SORTABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {"name", "email", "age", "status", "createdAt", "updatedAt"}
)

_STATUS_VALUES: Final[str] = ", ".join(s.value for s in UserStatus)
_BODY_FIELD: Final[str] = "body"
_ANY_RULE: Final[str] = "*"


# =============================================================================
# Resultado de validación
# =============================================================================


@dataclass(frozen=True)
class FieldError:
    """Una regla violada sobre un campo."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """
    Contrato:
      - Éxito: value != None y errors == ()
      - Falla: value == None y errors no vacío (orden estable)
    """

    value: Optional[T] = None
    errors: tuple[FieldError, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


# =============================================================================
# Reglas compartidas
# =============================================================================

NameText = Annotated[
    str, Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
]
EmailText = Annotated[str, Field(min_length=1, max_length=EMAIL_MAX_LENGTH)]
AgeInt = Annotated[int, Field(ge=AGE_MIN, le=AGE_MAX)]

_OBJECT_ID: Final = TypeAdapter(
    Annotated[str, StringConstraints(pattern=OBJECT_ID_PATTERN)]
)


def _integral_part(value: Any) -> Optional[int]:
    """Parte entera de un número finito con decimales (2.5 / "2.5"); si no, None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number.is_integer():
        return None
    return math.trunc(number)


def _whole_number(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """
    Entero validado por pydantic (modo lax: "42" y 42.0 pasan) que reporta
    todas las reglas violadas.

    - bool y null no son números.
    - Con decimales => `whole_number` + los límites que viola la parte entera
      (200.5 => whole_number, less_than_equal).
    """
    if value is None or isinstance(value, bool):
        raise PydanticCustomError("number_type", "Input should be a number")
    try:
        return handler(value)
    except ValidationError as exc:
        rules = [error["type"] for error in exc.errors()]

    whole = _integral_part(value)
    if whole is not None:
        rules = ["whole_number"]
        try:
            handler(whole)
        except ValidationError as exc:
            rules.extend(error["type"] for error in exc.errors())

    raise PydanticCustomError(
        "number_rules", "Input violates number rules", {"rules": rules}
    )


def parse_sort(raw: str) -> tuple[tuple[SortKey, ...], list[str]]:
    """
    Parsea `"-createdAt"`, `"name"`, `"status,-age"` o `"status -age"`.

    - Prefijo `-` => descendente; `+` o sin prefijo => ascendente.
    - Solo campos en SORTABLE_FIELDS.
    """
    tokens = [t for t in re.split(r"[,\s]+", raw.strip()) if t]
    if not tokens:
        return (), ["sort must not be empty"]

    keys: list[SortKey] = []
    errors: list[str] = []
    for token in tokens:
        descending = token.startswith("-")
        field_name = token.lstrip("+-")
        if field_name not in SORTABLE_FIELDS:
            allowed = ", ".join(sorted(SORTABLE_FIELDS))
            errors.append(f"sort field '{field_name}' must be one of [{allowed}]")
            continue
        keys.append(SortKey(field_name, descending=descending))
    return tuple(keys), errors


# =============================================================================
# Modelos de entrada
# =============================================================================


class _UserPayload(BaseModel):
    """Reglas comunes a alta y actualización."""

    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)

    @field_validator("name", "email", "status", mode="before", check_fields=False)
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("null_value", "Value must not be null")
        return value

    @field_validator("email", check_fields=False)
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        email = value.lower()
        if not EMAIL_PATTERN.fullmatch(email):
            raise PydanticCustomError(
                "email_format", "Please enter a valid email address"
            )
        return email

    @field_validator("age", mode="wrap", check_fields=False)
    @classmethod
    def check_age(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        return _whole_number(value, handler)


class UserCreate(_UserPayload):
    """Payload de alta ya normalizado (trim/lowercase/default de status)."""

    name: NameText
    email: EmailText
    age: Optional[AgeInt] = None
    status: UserStatus = UserStatus.ACTIVE


class UserUpdate(_UserPayload):
    """Payload de actualización parcial (solo los campos enviados quedan 'set')."""

    name: Optional[NameText] = None
    email: Optional[EmailText] = None
    age: Optional[AgeInt] = None
    status: Optional[UserStatus] = None

    @model_validator(mode="after")
    def require_changes(self) -> "UserUpdate":
        if not self.model_fields_set:
            raise PydanticCustomError(
                "empty_update", "At least one field must be provided"
            )
        return self

    def changes(self) -> dict[str, Any]:
        """Campos efectivamente enviados, por nombre de atributo."""
        return self.model_dump(exclude_unset=True)


class PaginationParams(BaseModel):
    """Query de listado normalizada; `sort_keys` se deriva de `sort`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    page: int = Field(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    sort: str = DEFAULT_SORT
    status: Optional[UserStatus] = None

    @field_validator("page", "limit", mode="wrap")
    @classmethod
    def check_whole_numbers(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        return _whole_number(value, handler)

    @field_validator("sort")
    @classmethod
    def check_sort(cls, value: str) -> str:
        _, messages = parse_sort(value)
        if messages:
            raise PydanticCustomError(
                "sort_rules", "Invalid sort", {"messages": messages}
            )
        return value

    @property
    def sort_keys(self) -> tuple[SortKey, ...]:
        return parse_sort(self.sort)[0]


# =============================================================================
# Mensajes por (campo, regla)
# =============================================================================

_PAYLOAD_MESSAGES: Final[dict[str, dict[str, str]]] = {
    _BODY_FIELD: {
        "model_type": "Request body must be a JSON object",
        "empty_update": "At least one field must be provided",
    },
    "name": {
        "missing": "Name is required",
        "string_too_short": f"Name must be at least {NAME_MIN_LENGTH} characters long",
        "string_too_long": f"Name cannot be longer than {NAME_MAX_LENGTH} characters",
        _ANY_RULE: "Name must be a string",
    },
    "email": {
        "missing": "Email is required",
        "string_too_long": f"Email cannot be longer than {EMAIL_MAX_LENGTH} characters",
        "email_format": "Please enter a valid email address",
        _ANY_RULE: "Email must be a string",
    },
    "age": {
        "whole_number": "Age must be a whole number",
        "greater_than_equal": "Age cannot be negative",
        "less_than_equal": f"Age cannot be more than {AGE_MAX}",
        _ANY_RULE: "Age must be a number",
    },
    "status": {_ANY_RULE: f"Status must be one of [{_STATUS_VALUES}]"},
}

_QUERY_MESSAGES: Final[dict[str, dict[str, str]]] = {
    _BODY_FIELD: {_ANY_RULE: "Query parameters must be a mapping"},
    "page": {
        "whole_number": "page must be an integer",
        "greater_than_equal": "page must be greater than or equal to 1",
        "less_than_equal": f"page must be less than or equal to {MAX_PAGE}",
        _ANY_RULE: "page must be a number",
    },
    "limit": {
        "whole_number": "limit must be an integer",
        "greater_than_equal": "limit must be greater than or equal to 1",
        "less_than_equal": f"limit must be less than or equal to {MAX_LIMIT}",
        _ANY_RULE: "limit must be a number",
    },
    "sort": {_ANY_RULE: "sort must be a string"},
    "status": {_ANY_RULE: f"status must be one of [{_STATUS_VALUES}]"},
}


def _rules_of(error: Mapping[str, Any]) -> list[str]:
    ctx = error.get("ctx") or {}
    if "rules" in ctx:
        return list(ctx["rules"])
    rule = error["type"]
    value = error.get("input")
    # "   " => tras el strip queda vacío: se reporta como faltante.
    if rule == "string_too_short" and isinstance(value, str) and not value.strip():
        return ["missing"]
    return [rule]


def _field_errors(
    exc: ValidationError, messages: Mapping[str, Mapping[str, str]]
) -> tuple[FieldError, ...]:
    """ValidationError de pydantic -> FieldErrors con los mensajes públicos."""
    errors: list[FieldError] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else _BODY_FIELD
        ctx = error.get("ctx") or {}
        if "messages" in ctx:
            errors.extend(FieldError(field, m) for m in ctx["messages"])
            continue

        table = messages.get(field, {})
        for rule in _rules_of(error):
            message = table.get(rule) or table.get(_ANY_RULE) or error["msg"]
            errors.append(FieldError(field, message))
    return tuple(errors)


def _validate(
    model: type[BaseModel], raw: Any, messages: Mapping[str, Mapping[str, str]]
) -> ValidationResult[Any]:
    try:
        return ValidationResult(value=model.model_validate(raw))
    except ValidationError as exc:
        return ValidationResult(errors=_field_errors(exc, messages))


# =============================================================================
# API pública
# =============================================================================


def validate_create_payload(raw: Any) -> ValidationResult[UserCreate]:
    """Valida un alta: name/email obligatorios, status default `active`."""
    return _validate(UserCreate, raw, _PAYLOAD_MESSAGES)


def validate_update_payload(raw: Any) -> ValidationResult[UserUpdate]:
    """
    Valida una actualización parcial.

    Regla estructural: tras descartar claves desconocidas debe quedar al menos
    un campo conocido.
    """
    return _validate(UserUpdate, raw, _PAYLOAD_MESSAGES)


def validate_identifier(raw: Any) -> ValidationResult[str]:
    """Token de 24 caracteres hexadecimales (normalizado a minúsculas)."""
    try:
        return ValidationResult(value=_OBJECT_ID.validate_python(raw).lower())
    except ValidationError:
        return ValidationResult(errors=(FieldError("id", "Invalid ID format"),))


def validate_pagination(
    raw: Mapping[str, Any] | None,
) -> ValidationResult[PaginationParams]:
    """
    Valida page/limit/sort/status.

    - Defaults: page=1, limit=10, sort=-createdAt.
    - Fuera de rango o no numérico => error (nunca se "clampea").
    """
    return _validate(PaginationParams, raw or {}, _QUERY_MESSAGES)
