"""
===============================================================================
CRC CARD — infrastructure/db/pool.py
===============================================================================

Componente:
  Pool de conexiones PostgreSQL (handle explícito, sin singleton global)

Responsabilidades:
  - Abrir un ConnectionPool configurado (statement_timeout por conexión).
  - Exponer un scope (context manager) que garantiza el cierre en shutdown.
  - Traducir fallas de apertura a errores tipados.

Colaboradores:
  - psycopg_pool.ConnectionPool
  - api/main.py (lifespan: abre el scope una vez por proceso)
  - infrastructure/repositories/postgres (recibe el pool por constructor)

Principios:
  - Fail-fast (config incorrecta, DB inalcanzable al arrancar)
  - El pool se pasa explícitamente; nadie lo busca en un global
===============================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from functools import partial
from typing import Iterator

from psycopg_pool import ConnectionPool, PoolTimeout

from ...crosscutting.logger import logger
from .errors import DatabaseConnectionError, InvalidPoolConfigError

DEFAULT_OPEN_TIMEOUT_SECONDS = 10.0


def _configure_connection(conn, *, statement_timeout_ms: int) -> None:
    """
    Configura cada conexión nueva del pool.

    statement_timeout es un guardrail contra queries colgadas.
    """
    if statement_timeout_ms > 0:
        conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
        conn.commit()


def open_pool(
    database_url: str,
    *,
    min_size: int = 1,
    max_size: int = 10,
    statement_timeout_ms: int = 30_000,
    open_timeout: float = DEFAULT_OPEN_TIMEOUT_SECONDS,
) -> ConnectionPool:
    """
    Abre el pool y espera a que tenga `min_size` conexiones listas.

    Raises:
      - InvalidPoolConfigError: URL vacía o tamaños inconsistentes.
      - DatabaseConnectionError: la DB no respondió dentro de `open_timeout`.
    """
    if not database_url:
        raise InvalidPoolConfigError("database_url es requerido para abrir el pool.")
    if min_size < 0 or max_size < 1 or min_size > max_size:
        raise InvalidPoolConfigError(
            f"Tamaños de pool inválidos: min_size={min_size}, max_size={max_size}"
        )

    logger.info(
        "Inicializando pool DB",
        extra={"min_size": min_size, "max_size": max_size},
    )

    pool = ConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        configure=partial(
            _configure_connection, statement_timeout_ms=statement_timeout_ms
        ),
        open=True,
    )

    try:
        pool.wait(timeout=open_timeout)
    except PoolTimeout as exc:
        pool.close()
        raise DatabaseConnectionError(
            f"No se pudo conectar a la DB en {open_timeout}s"
        ) from exc

    logger.info(
        "Pool DB inicializado",
        extra={"min_size": min_size, "max_size": max_size},
    )
    return pool


def close_pool(pool: ConnectionPool | None) -> None:
    """Cierra el pool (idempotente, tolera None)."""
    if pool is None or pool.closed:
        return
    logger.info("Cerrando pool DB")
    pool.close()
    logger.info("Pool DB cerrado")


@contextmanager
def pool_scope(
    database_url: str,
    *,
    min_size: int = 1,
    max_size: int = 10,
    statement_timeout_ms: int = 30_000,
) -> Iterator[ConnectionPool]:
    """Abre el pool al entrar y lo cierra al salir (también ante excepciones)."""
    pool = open_pool(
        database_url,
        min_size=min_size,
        max_size=max_size,
        statement_timeout_ms=statement_timeout_ms,
    )
    try:
        yield pool
    finally:
        close_pool(pool)
