"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (create_app) with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount the users router under the configurable API prefix (default /api)
  - Open/close the storage handle in the lifespan and expose /healthz

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - infrastructure.db: pool_scope + ensure_schema
  - container: repository + UserService composition

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - No rate limiting or authentication

Notes:
  - The pool is opened once per process and passed explicitly to the repository
  - STORAGE_BACKEND=memory runs without a database (tests / local dev)
  - /healthz follows Kubernetes health check convention
"""

from contextlib import ExitStack, asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..container import build_user_repository, build_user_service
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..infrastructure.db import ensure_schema, pool_scope
from ..interfaces.api.http.router import build_router
from ..interfaces.api.http.schemas.users import HealthRes
from .exception_handlers import register_exception_handlers

APP_TITLE = "Users API"
APP_VERSION = "0.1.0"


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle: storage handle + service composition."""
        with ExitStack() as stack:
            pool = None
            if settings.storage_backend == "postgres":
                # R: Pool must exist before any repository usage
                pool = stack.enter_context(
                    pool_scope(
                        settings.database_url,
                        min_size=settings.db_pool_min_size,
                        max_size=settings.db_pool_max_size,
                        statement_timeout_ms=settings.db_statement_timeout_ms,
                    )
                )
                ensure_schema(pool)

            repository = build_user_repository(settings, pool)
            app.state.user_repository = repository
            app.state.user_service = build_user_service(repository, settings)

            logger.info(
                "Users API starting up",
                extra={
                    "app_env": settings.app_env,
                    "storage_backend": settings.storage_backend,
                    "api_prefix": settings.api_prefix,
                    "db_pool_min": settings.db_pool_min_size,
                    "db_pool_max": settings.db_pool_max_size,
                },
            )
            try:
                yield
            finally:
                app.state.user_service = None
                app.state.user_repository = None
                logger.info("Users API shutting down")

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """R: Application factory (tests pass their own Settings)."""
    settings = settings or get_settings()

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        lifespan=_lifespan_for(settings),
        openapi_tags=[
            {"name": "users", "description": "User resource management"},
        ],
    )

    # R: Middleware order (bottom = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.state.settings = settings
    app.include_router(build_router(), prefix=settings.api_prefix)
    register_exception_handlers(app)

    # R: Health check endpoint for monitoring/orchestration (Kubernetes, Docker)
    @app.get("/healthz", response_model=HealthRes, tags=["health"])
    def healthz(request: Request):
        """
        R: Verifies the storage backend.

        Returns:
            ok: True if storage is reachable
            db: "connected" or "disconnected"
            request_id: Correlation ID for this request
        """
        db_status = "disconnected"
        repository = getattr(request.app.state, "user_repository", None)
        if repository is not None and repository.ping():
            db_status = "connected"

        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app
