"""User use cases (CRUD + stats)."""

from .create_user import CreateUserUseCase
from .delete_user import DeleteUserUseCase
from .get_user import GetUserUseCase
from .get_user_stats import GetUserStatsUseCase
from .list_users import ListUsersUseCase
from .update_user import UpdateUserUseCase
from .user_results import (
    DeleteUserResult,
    ListUsersResult,
    UserError,
    UserErrorCode,
    UserResult,
    UserStatsResult,
)

__all__ = [
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserUseCase",
    "GetUserStatsUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
    "DeleteUserResult",
    "ListUsersResult",
    "UserError",
    "UserErrorCode",
    "UserResult",
    "UserStatsResult",
]
