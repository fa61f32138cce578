"""Infrastructure adapters (DB pool, repositories)."""
