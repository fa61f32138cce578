"""Application layer: validators, use cases and the User service facade."""

from .user_service import ServiceResponse, UserService

__all__ = ["ServiceResponse", "UserService"]
