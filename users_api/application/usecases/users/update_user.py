"""
===============================================================================
USE CASE: Update User (Partial)
===============================================================================

Business Goal:
    Actualizar parcialmente un usuario existente, re-chequeando la unicidad del
    email contra los demás usuarios.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    UpdateUserUseCase

Responsibilities:
    - Si el payload trae email: pre-check excluyendo el propio id.
    - Aplicar update_by_id (el storage refresca updated_at y re-valida).
    - Mapear NOT_FOUND / DUPLICATE_KEY / INTERNAL a UserError.

Collaborators:
    - UserRepository.find_one / update_by_id
    - UserUpdate (payload normalizado, al menos un campo)
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import RepoStatus, UserFilter, UserRepository
from ...validation import UserUpdate
from .user_results import UserResult, conflict_error, internal_error, not_found_error


class UpdateUserUseCase:
    """Command: actualización parcial de usuario."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self, user_id: str, payload: UserUpdate) -> UserResult:
        changes = payload.changes()

        # 1) Pre-check de email contra otros usuarios.
        if "email" in changes:
            existing = self._repository.find_one(
                UserFilter(email=changes["email"], exclude_id=user_id)
            )
            if existing.status is RepoStatus.OK:
                return UserResult(error=conflict_error())
            if existing.status is not RepoStatus.NOT_FOUND:
                return UserResult(error=internal_error(existing.detail))

        # 2) Update parcial.
        updated = self._repository.update_by_id(user_id, changes)

        if updated.status is RepoStatus.OK:
            return UserResult(user=updated.value)
        if updated.status is RepoStatus.NOT_FOUND:
            return UserResult(error=not_found_error())
        if updated.status is RepoStatus.DUPLICATE_KEY:
            return UserResult(error=conflict_error())
        return UserResult(error=internal_error(updated.detail))
