"""Users API: User resource management service (FastAPI + PostgreSQL)."""

__version__ = "0.1.0"
