"""
PostgreSQL Repository Implementations.

Production implementations using psycopg 3 + psycopg_pool (raw SQL).
"""

from .user import PostgresUserRepository

__all__ = ["PostgresUserRepository"]
