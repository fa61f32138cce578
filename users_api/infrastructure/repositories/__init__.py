"""
============================================================
TARJETA CRC
============================================================
Class: users_api.infrastructure.repositories (Package exports)

Responsibilities:
- Exponer implementaciones concretas de UserRepository (Postgres e InMemory)
  en un único punto de importación.

Collaborators:
- Repositorio Postgres (SQL crudo)
- Repositorio InMemory (testing / STORAGE_BACKEND=memory)
============================================================
"""

from .in_memory import InMemoryUserRepository
from .object_ids import new_object_id
from .postgres import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "InMemoryUserRepository",
    "new_object_id",
]
