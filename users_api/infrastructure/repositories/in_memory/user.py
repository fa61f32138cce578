"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Almacenar usuarios en memoria (tests / local dev con STORAGE_BACKEND=memory).
  - Replicar las constraints del storage real:
      - UNIQUE(email) -> DUPLICATE_KEY
      - name 2..50, email <= 254, age 0..150, status enum -> INTERNAL
        (constraint violation)
  - Ordenar igual que Postgres (NULLS LAST en ASC, NULLS FIRST en DESC,
    desempate por id ASC).
  - Agregar estadísticas en una sola pasada.

Collaborators:
  - domain.repositories: UserRepository (contrato), RepoResult, filtros
  - infrastructure.repositories.object_ids (ids)

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Entidades inmutables: cada update reemplaza el User (dataclasses.replace).
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ....domain.entities import User, UserStats, UserStatus
from ....domain.repositories import (
    NewUser,
    RepoResult,
    SortKey,
    UserFilter,
    UserPage,
    UserRepository,
)
from ..object_ids import new_object_id

# R: Campo público (camelCase) -> atributo de la entidad.
_SORT_ATTRIBUTES: Dict[str, str] = {
    "name": "name",
    "email": "email",
    "age": "age",
    "status": "status",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
_UPDATABLE_ATTRIBUTES = frozenset({"name", "email", "age", "status"})


class InMemoryUserRepository(UserRepository):
    """
    Repositorio in-memory, thread-safe, para Users.

    Modelo mental:
    - _users es la "tabla" (id -> User).
    - Cada operación lee/escribe bajo lock.
    """

    def __init__(self, users: Iterable[User] = ()) -> None:
        self._lock = Lock()
        self._users: Dict[str, User] = {u.id: u for u in users}

    # =========================================================
    # Helpers internos
    # =========================================================
    @staticmethod
    def _now() -> datetime:
        """R: Fuente única de tiempo (UTC)."""
        return datetime.now(timezone.utc)

    @staticmethod
    def _matches(user: User, user_filter: UserFilter) -> bool:
        if user_filter.email is not None and user.email != user_filter.email:
            return False
        if user_filter.status is not None and user.status != user_filter.status:
            return False
        if user_filter.exclude_id is not None and user.id == user_filter.exclude_id:
            return False
        return True

    @staticmethod
    def _sort_value(user: User, attribute: str) -> Any:
        value = getattr(user, attribute)
        return value.value if isinstance(value, UserStatus) else value

    @classmethod
    def _sorted(cls, users: Iterable[User], sort: Sequence[SortKey]) -> List[User]:
        """
        R: Lista nueva ordenada por varias claves (sorts estables sucesivos).

        (value is None, value) deja los None al final en ASC y al principio
        en DESC, igual que el default de Postgres.
        """
        ordered = sorted(users, key=lambda u: u.id)
        for key in reversed(list(sort)):
            attribute = _SORT_ATTRIBUTES[key.field]
            ordered.sort(
                key=lambda u, a=attribute: (
                    cls._sort_value(u, a) is None,
                    cls._sort_value(u, a),
                ),
                reverse=key.descending,
            )
        return ordered

    @staticmethod
    def _constraint_violation(user: User) -> Optional[str]:
        """R: Mismas CHECK constraints que la tabla `users`."""
        if not 2 <= len(user.name) <= 50:
            return "users_name_length_check"
        if len(user.email) > 254:
            return "value too long for users.email (VARCHAR(254))"
        if user.age is not None and not 0 <= user.age <= 150:
            return "users_age_range_check"
        if not isinstance(user.status, UserStatus):
            return "users_status_check"
        if user.updated_at < user.created_at:
            return "users_timestamps_check"
        return None

    def _email_taken(self, email: str, *, exclude_id: Optional[str] = None) -> bool:
        return any(
            u.email == email and u.id != exclude_id for u in self._users.values()
        )

    # =========================================================
    # Lecturas
    # =========================================================
    def find_many(
        self,
        user_filter: UserFilter,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> RepoResult[UserPage]:
        with self._lock:
            matched = [u for u in self._users.values() if self._matches(u, user_filter)]
        ordered = self._sorted(matched, sort)
        return RepoResult.ok(
            UserPage(items=ordered[offset : offset + limit], total=len(matched))
        )

    def find_by_id(self, user_id: str) -> RepoResult[User]:
        with self._lock:
            user = self._users.get(user_id)
        return RepoResult.ok(user) if user is not None else RepoResult.not_found()

    def find_one(self, user_filter: UserFilter) -> RepoResult[User]:
        with self._lock:
            matched = [u for u in self._users.values() if self._matches(u, user_filter)]
        if not matched:
            return RepoResult.not_found()
        return RepoResult.ok(min(matched, key=lambda u: u.id))

    # =========================================================
    # Escrituras
    # =========================================================
    def insert(self, new_user: NewUser) -> RepoResult[User]:
        now = self._now()
        user = User(
            id=new_object_id(now.timestamp()),
            name=new_user.name,
            email=new_user.email,
            status=new_user.status,
            age=new_user.age,
            created_at=now,
            updated_at=now,
        )
        violation = self._constraint_violation(user)
        if violation is not None:
            return RepoResult.internal(f"constraint violation: {violation}")

        with self._lock:
            if self._email_taken(user.email):
                return RepoResult.duplicate_key("email")
            self._users[user.id] = user
        return RepoResult.ok(user)

    def update_by_id(self, user_id: str, changes: dict) -> RepoResult[User]:
        unknown = set(changes) - _UPDATABLE_ATTRIBUTES
        if unknown:
            return RepoResult.internal(f"unknown columns: {sorted(unknown)}")

        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return RepoResult.not_found()

            updated = replace(
                current,
                **changes,
                updated_at=max(self._now(), current.created_at),
            )
            violation = self._constraint_violation(updated)
            if violation is not None:
                return RepoResult.internal(f"constraint violation: {violation}")
            if "email" in changes and self._email_taken(
                updated.email, exclude_id=user_id
            ):
                return RepoResult.duplicate_key("email")

            self._users[user_id] = updated
        return RepoResult.ok(updated)

    def delete_by_id(self, user_id: str) -> RepoResult[User]:
        with self._lock:
            removed = self._users.pop(user_id, None)
        return RepoResult.ok(removed) if removed is not None else RepoResult.not_found()

    # =========================================================
    # Agregados / salud
    # =========================================================
    def aggregate_stats(self) -> RepoResult[UserStats]:
        total = active = inactive = 0
        age_sum = age_count = 0
        with self._lock:
            for user in self._users.values():
                total += 1
                if user.status is UserStatus.ACTIVE:
                    active += 1
                else:
                    inactive += 1
                if user.age is not None:
                    age_sum += user.age
                    age_count += 1

        return RepoResult.ok(
            UserStats(
                total_users=total,
                active_users=active,
                inactive_users=inactive,
                average_age=(age_sum / age_count) if age_count else 0.0,
            )
        )

    def ping(self) -> bool:
        return True
