"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match local development

Collaborators:
  - api/main.py: reads settings for CORS, prefix and pool lifecycle
  - container.py: decides storage backend and error exposure
  - crosscutting/logger.py: reads log level / format

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic — pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_STORAGE_BACKENDS = {"postgres", "memory"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string (required for postgres backend)
        app_env: Application environment (development/production/test)
        storage_backend: postgres | memory
        api_prefix: Prefix for the users router (default: /api)
        allowed_origins: Comma-separated CORS origins
        db_pool_min_size: Minimum pool connections (default: 1)
        db_pool_max_size: Maximum pool connections (default: 10)
        db_statement_timeout_ms: Per-statement timeout (default: 30s)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
    """

    database_url: str = ""

    # Environment
    app_env: str = "development"

    # Storage
    storage_backend: str = "postgres"

    # HTTP
    api_prefix: str = "/api"
    allowed_origins: str = "http://localhost:3000"

    # Database - Connection Pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("storage_backend")
    @classmethod
    def storage_backend_valid(cls, v: str) -> str:
        backend = (v or "postgres").strip().lower()
        if backend not in _STORAGE_BACKENDS:
            raise ValueError("storage_backend must be postgres or memory")
        return backend

    @field_validator("api_prefix")
    @classmethod
    def api_prefix_normalized(cls, v: str) -> str:
        prefix = (v or "").strip().rstrip("/")
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        return prefix

    @field_validator("db_pool_min_size")
    @classmethod
    def pool_min_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("db_pool_min_size must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_pool_sizes(self):
        if self.db_pool_max_size < max(1, self.db_pool_min_size):
            raise ValueError(
                f"db_pool_max_size ({self.db_pool_max_size}) must be >= "
                f"db_pool_min_size ({self.db_pool_min_size}) and >= 1"
            )
        return self

    @model_validator(mode="after")
    def validate_database_requirements(self):
        if self.storage_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required unless STORAGE_BACKEND=memory")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
