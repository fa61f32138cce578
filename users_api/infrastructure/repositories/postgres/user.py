"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - CRUD + conteo + agregado de estadísticas sobre la tabla `users`.
  - Ejecutar SQL parametrizado (nunca interpolar input de usuario; columnas
    y ordenamientos salen de whitelists).
  - Mapear filas crudas -> entidad de dominio `User`.
  - Traducir fallos a RepoResult:
      UniqueViolation -> DUPLICATE_KEY
      cualquier otro  -> INTERNAL (logueado con stacktrace)
  - Leer page + count en paralelo (dos lecturas independientes).

Collaborators:
  - psycopg_pool.ConnectionPool (inyectado por constructor)
  - domain.repositories: UserRepository, RepoResult, filtros
  - infrastructure.repositories.object_ids (ids)
  - crosscutting.logger.logger (logs)

Constraints / Notes:
  - Repositorio puro: NO define reglas de negocio (la unicidad la decide
    la constraint `users_email_key`).
  - Orden estable en listados: claves pedidas + id ASC.
============================================================
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence, TypeVar

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.logger import logger
from ....domain.entities import User, UserStats, UserStatus
from ....domain.repositories import (
    NewUser,
    RepoResult,
    RepoStatus,
    SortKey,
    UserFilter,
    UserPage,
    UserRepository,
)
from ...db.schema import USERS_TABLE
from ..object_ids import new_object_id

T = TypeVar("T")

# ============================================================
# Constantes y contratos de SQL
# ============================================================
# R: Lista explícita de columnas (orden = índice en _row_to_user).
_USER_COLUMNS = "id, name, email, age, status, created_at, updated_at"

# R: Campo público (camelCase) -> columna. Whitelist para ORDER BY.
_SORT_COLUMNS: dict[str, str] = {
    "name": "name",
    "email": "email",
    "age": "age",
    "status": "status",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# R: Atributo de la entidad -> columna. Whitelist para UPDATE.
_UPDATABLE_COLUMNS: dict[str, str] = {
    "name": "name",
    "email": "email",
    "age": "age",
    "status": "status",
}


# ============================================================
# Helpers internos: mapping + SQL
# ============================================================
def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0].strip(),
        name=row[1],
        email=row[2],
        age=row[3],
        status=UserStatus(row[4]),
        created_at=row[5],
        updated_at=row[6],
    )


def _where(user_filter: UserFilter) -> tuple[str, list[object]]:
    """R: WHERE parametrizado (AND de los campos presentes)."""
    clauses: list[str] = []
    params: list[object] = []
    if user_filter.email is not None:
        clauses.append("email = %s")
        params.append(user_filter.email)
    if user_filter.status is not None:
        clauses.append("status = %s")
        params.append(user_filter.status.value)
    if user_filter.exclude_id is not None:
        clauses.append("id <> %s")
        params.append(user_filter.exclude_id)
    if not clauses:
        return "", params
    return "WHERE " + " AND ".join(clauses), params


def _order_by(sort: Sequence[SortKey]) -> str:
    parts = [
        f"{_SORT_COLUMNS[key.field]} {'DESC' if key.descending else 'ASC'}"
        for key in sort
    ]
    parts.append("id ASC")
    return ", ".join(parts)


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, UserStatus) else value


class PostgresUserRepository(UserRepository):
    """
    R: Implementación PostgreSQL del contrato UserRepository.

    El pool se recibe por constructor; este repo no abre ni cierra el pool.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    # ============================================================
    # Ejecución con manejo consistente de errores
    # ============================================================
    def _run(
        self,
        work: Callable[[Any], RepoResult[T]],
        *,
        log_msg: str,
        log_extra: Optional[dict[str, object]] = None,
    ) -> RepoResult[T]:
        """
        Ejecuta `work(conn)` dentro de una conexión del pool (commit al salir).

        - UniqueViolation -> DUPLICATE_KEY (esperado, se loguea en warning)
        - Exception       -> INTERNAL (se loguea con stacktrace)
        """
        extra = dict(log_extra or {})
        try:
            with self._pool.connection() as conn:
                return work(conn)
        except pg_errors.UniqueViolation as exc:
            logger.warning(
                log_msg,
                extra={**extra, "constraint": getattr(exc.diag, "constraint_name", None)},
            )
            return RepoResult.duplicate_key("email")
        except Exception as exc:
            logger.exception(log_msg, extra={**extra, "error": str(exc)})
            return RepoResult.internal(f"{log_msg}: {exc}")

    # ============================================================
    # Lecturas
    # ============================================================
    def _count(self, user_filter: UserFilter) -> RepoResult[int]:
        where, params = _where(user_filter)

        def work(conn) -> RepoResult[int]:
            row = conn.execute(
                f"SELECT COUNT(*) FROM {USERS_TABLE} {where}", tuple(params)
            ).fetchone()
            return RepoResult.ok(int(row[0]) if row else 0)

        return self._run(work, log_msg="PostgresUserRepository: count failed")

    def _select_page(
        self,
        user_filter: UserFilter,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> RepoResult[list[User]]:
        where, params = _where(user_filter)

        def work(conn) -> RepoResult[list[User]]:
            rows = conn.execute(
                f"""
                SELECT {_USER_COLUMNS}
                FROM {USERS_TABLE}
                {where}
                ORDER BY {_order_by(sort)}
                LIMIT %s OFFSET %s
                """,
                (*params, limit, offset),
            ).fetchall()
            return RepoResult.ok([_row_to_user(r) for r in rows])

        return self._run(
            work,
            log_msg="PostgresUserRepository: find_many failed",
            log_extra={"offset": offset, "limit": limit},
        )

    def find_many(
        self,
        user_filter: UserFilter,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> RepoResult[UserPage]:
        """R: Page + count en paralelo, sobre el mismo filtro."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            page_future = executor.submit(
                self._select_page, user_filter, sort, offset, limit
            )
            count_future = executor.submit(self._count, user_filter)
            page = page_future.result()
            count = count_future.result()

        if page.status is not RepoStatus.OK or page.value is None:
            return RepoResult(page.status, detail=page.detail)
        if count.status is not RepoStatus.OK or count.value is None:
            return RepoResult(count.status, detail=count.detail)
        return RepoResult.ok(UserPage(items=page.value, total=count.value))

    def find_by_id(self, user_id: str) -> RepoResult[User]:
        def work(conn) -> RepoResult[User]:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM {USERS_TABLE} WHERE id = %s",
                (user_id,),
            ).fetchone()
            return RepoResult.ok(_row_to_user(row)) if row else RepoResult.not_found()

        return self._run(
            work,
            log_msg="PostgresUserRepository: find_by_id failed",
            log_extra={"user_id": user_id},
        )

    def find_one(self, user_filter: UserFilter) -> RepoResult[User]:
        where, params = _where(user_filter)

        def work(conn) -> RepoResult[User]:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM {USERS_TABLE} {where} ORDER BY id ASC LIMIT 1",
                tuple(params),
            ).fetchone()
            return RepoResult.ok(_row_to_user(row)) if row else RepoResult.not_found()

        return self._run(work, log_msg="PostgresUserRepository: find_one failed")

    # ============================================================
    # Escrituras
    # ============================================================
    def insert(self, new_user: NewUser) -> RepoResult[User]:
        now = datetime.now(timezone.utc)
        user_id = new_object_id(now.timestamp())

        def work(conn) -> RepoResult[User]:
            row = conn.execute(
                f"""
                INSERT INTO {USERS_TABLE}
                    (id, name, email, age, status, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING {_USER_COLUMNS}
                """,
                (
                    user_id,
                    new_user.name,
                    new_user.email,
                    new_user.age,
                    new_user.status.value,
                    now,
                    now,
                ),
            ).fetchone()
            return RepoResult.ok(_row_to_user(row))

        return self._run(
            work,
            log_msg="PostgresUserRepository: insert failed",
            log_extra={"user_id": user_id},
        )

    def update_by_id(self, user_id: str, changes: dict) -> RepoResult[User]:
        unknown = set(changes) - set(_UPDATABLE_COLUMNS)
        if unknown:
            return RepoResult.internal(f"unknown columns: {sorted(unknown)}")

        assignments = [f"{_UPDATABLE_COLUMNS[k]} = %s" for k in changes]
        assignments.append("updated_at = GREATEST(now(), created_at)")
        params = [_column_value(v) for v in changes.values()]

        def work(conn) -> RepoResult[User]:
            row = conn.execute(
                f"""
                UPDATE {USERS_TABLE}
                SET {", ".join(assignments)}
                WHERE id = %s
                RETURNING {_USER_COLUMNS}
                """,
                (*params, user_id),
            ).fetchone()
            return RepoResult.ok(_row_to_user(row)) if row else RepoResult.not_found()

        return self._run(
            work,
            log_msg="PostgresUserRepository: update_by_id failed",
            log_extra={"user_id": user_id, "fields": sorted(changes)},
        )

    def delete_by_id(self, user_id: str) -> RepoResult[User]:
        def work(conn) -> RepoResult[User]:
            row = conn.execute(
                f"DELETE FROM {USERS_TABLE} WHERE id = %s RETURNING {_USER_COLUMNS}",
                (user_id,),
            ).fetchone()
            return RepoResult.ok(_row_to_user(row)) if row else RepoResult.not_found()

        return self._run(
            work,
            log_msg="PostgresUserRepository: delete_by_id failed",
            log_extra={"user_id": user_id},
        )

    # ============================================================
    # Agregados / salud
    # ============================================================
    def aggregate_stats(self) -> RepoResult[UserStats]:
        """R: Un único SELECT agregado; AVG ignora NULLs (usuarios sin edad)."""

        def work(conn) -> RepoResult[UserStats]:
            row = conn.execute(
                f"""
                SELECT
                    COUNT(*),
                    COUNT(*) FILTER (WHERE status = 'active'),
                    COUNT(*) FILTER (WHERE status = 'inactive'),
                    AVG(age)
                FROM {USERS_TABLE}
                """
            ).fetchone()
            total, active, inactive, average = row if row else (0, 0, 0, None)
            return RepoResult.ok(
                UserStats(
                    total_users=int(total),
                    active_users=int(active),
                    inactive_users=int(inactive),
                    average_age=float(average) if average is not None else 0.0,
                )
            )

        return self._run(work, log_msg="PostgresUserRepository: aggregate_stats failed")

    def ping(self) -> bool:
        try:
            with self._pool.connection() as conn:
                conn.execute("SELECT 1")
            return True
        except Exception as exc:
            logger.warning("PostgresUserRepository: ping failed", extra={"error": str(exc)})
            return False
