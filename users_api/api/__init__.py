"""HTTP application (FastAPI factory, lifespan, exception handlers)."""
