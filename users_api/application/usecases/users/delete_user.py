"""
CRC — application/usecases/users/delete_user.py

Name
- DeleteUserUseCase

Responsibilities
- Hard-delete a User by id and report the removed (id, email) pair.
- Not idempotent: a second delete of the same id yields NOT_FOUND.

Collaborators
- UserRepository.delete_by_id
"""

from __future__ import annotations

from ....domain.repositories import RepoStatus, UserRepository
from .user_results import DeleteUserResult, internal_error, not_found_error


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self, user_id: str) -> DeleteUserResult:
        result = self._repository.delete_by_id(user_id)

        if result.status is RepoStatus.OK and result.value is not None:
            return DeleteUserResult(user_id=result.value.id, email=result.value.email)
        if result.status is RepoStatus.NOT_FOUND:
            return DeleteUserResult(error=not_found_error())
        return DeleteUserResult(error=internal_error(result.detail))
