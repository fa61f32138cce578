"""
===============================================================================
TARJETA CRC — dependencies.py (Dependencias FastAPI)
===============================================================================

Responsabilidades:
  - Resolver el UserService construido en el lifespan (app.state).
  - Fallar explícito (503) si la app no terminó de arrancar.

Colaboradores:
  - api/main.py (lifespan: setea app.state.user_service)
  - crosscutting.error_responses.service_unavailable
===============================================================================
"""

from __future__ import annotations

from fastapi import Request

from users_api.application.user_service import UserService
from users_api.crosscutting.error_responses import service_unavailable


def get_user_service(request: Request) -> UserService:
    service = getattr(request.app.state, "user_service", None)
    if service is None:
        raise service_unavailable("user storage")
    return service
