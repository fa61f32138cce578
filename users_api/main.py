"""
Name: ASGI entrypoint

Usage:
  uvicorn users_api.main:app --reload
  python -m users_api.main
"""

import uvicorn

from .api.main import create_app
from .crosscutting.config import get_settings

app = create_app()


def run() -> None:
    """Console script entrypoint (`users-api`)."""
    uvicorn.run(
        "users_api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=get_settings().log_level.lower(),
    )


if __name__ == "__main__":
    run()
