"""
CRC — application/usecases/users/get_user.py

Name
- GetUserUseCase

Responsibilities
- Fetch a single User by (already validated) id.
- Translate NOT_FOUND / INTERNAL into UserError.

Collaborators
- UserRepository.find_by_id
"""

from __future__ import annotations

from ....domain.repositories import RepoStatus, UserRepository
from .user_results import UserResult, internal_error, not_found_error


class GetUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self, user_id: str) -> UserResult:
        result = self._repository.find_by_id(user_id)

        if result.status is RepoStatus.OK:
            return UserResult(user=result.value)
        if result.status is RepoStatus.NOT_FOUND:
            return UserResult(error=not_found_error())
        return UserResult(error=internal_error(result.detail))
