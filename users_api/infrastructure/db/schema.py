"""
CRC — infrastructure/db/schema.py

Name
- Users table DDL (idempotent)

Responsibilities
- Create the `users` table, its constraints and indexes if missing.
- Keep storage-level invariants next to the data:
    * UNIQUE(email)                      -> source of truth for uniqueness
    * CHECK on name length / age range / status enum
    * updated_at >= created_at

Collaborators
- psycopg_pool.ConnectionPool (provided by the caller)
- api/main.py lifespan (runs ensure_schema once at startup)

Notes
- No migration framework: statements use IF NOT EXISTS and are safe to re-run.
"""

from __future__ import annotations

from typing import Final

from psycopg import Error as PsycopgError

from ...crosscutting.logger import logger
from .errors import SchemaInitializationError

USERS_TABLE: Final[str] = "users"
EMAIL_UNIQUE_CONSTRAINT: Final[str] = "users_email_key"

DDL_STATEMENTS: Final[tuple[str, ...]] = (
    f"""
    CREATE TABLE IF NOT EXISTS {USERS_TABLE} (
        id          CHAR(24)     PRIMARY KEY,
        name        VARCHAR(50)  NOT NULL,
        email       VARCHAR(254) NOT NULL,
        age         INTEGER      NULL,
        status      VARCHAR(16)  NOT NULL DEFAULT 'active',
        created_at  TIMESTAMPTZ  NOT NULL DEFAULT now(),
        updated_at  TIMESTAMPTZ  NOT NULL DEFAULT now(),
        CONSTRAINT {EMAIL_UNIQUE_CONSTRAINT} UNIQUE (email),
        CONSTRAINT users_name_length_check CHECK (char_length(name) BETWEEN 2 AND 50),
        CONSTRAINT users_age_range_check CHECK (age IS NULL OR age BETWEEN 0 AND 150),
        CONSTRAINT users_status_check CHECK (status IN ('active', 'inactive')),
        CONSTRAINT users_timestamps_check CHECK (updated_at >= created_at)
    )
    """,
    f"CREATE INDEX IF NOT EXISTS users_status_idx ON {USERS_TABLE} (status)",
    f"CREATE INDEX IF NOT EXISTS users_created_at_idx ON {USERS_TABLE} (created_at DESC)",
)


def ensure_schema(pool) -> None:
    """Aplica el DDL en una única transacción."""
    try:
        with pool.connection() as conn:
            for statement in DDL_STATEMENTS:
                conn.execute(statement)
    except PsycopgError as exc:
        logger.exception("No se pudo aplicar el schema de users")
        raise SchemaInitializationError(str(exc)) from exc

    logger.info("Schema de users verificado", extra={"table": USERS_TABLE})
