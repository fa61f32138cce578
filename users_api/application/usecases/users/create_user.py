"""
===============================================================================
USE CASE: Create User
===============================================================================

Business Goal:
    Registrar un usuario nuevo garantizando unicidad de email.

Why (Context / Intención):
    - El pre-check por email da un CONFLICT temprano sin tocar el write path.
    - El pre-check NO es atómico con el insert: la unique constraint del
      storage es la fuente de verdad y su violación se traduce al mismo CONFLICT.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateUserUseCase

Responsibilities:
    - Pre-check de email (find_one).
    - Insertar el usuario (status default ya resuelto por el validador).
    - Mapear DUPLICATE_KEY -> CONFLICT, INTERNAL -> INTERNAL_ERROR.

Collaborators:
    - UserRepository.find_one / insert
    - UserCreate (payload normalizado)
===============================================================================
"""

from __future__ import annotations

from ....domain.repositories import NewUser, RepoStatus, UserFilter, UserRepository
from ...validation import UserCreate
from .user_results import UserResult, conflict_error, internal_error


class CreateUserUseCase:
    """Command: alta de usuario."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self, payload: UserCreate) -> UserResult:
        # ---------------------------------------------------------------------
        # 1) Pre-check de unicidad (advisory).
        # ---------------------------------------------------------------------
        existing = self._repository.find_one(UserFilter(email=payload.email))
        if existing.status is RepoStatus.OK:
            return UserResult(error=conflict_error())
        if existing.status is not RepoStatus.NOT_FOUND:
            return UserResult(error=internal_error(existing.detail))

        # ---------------------------------------------------------------------
        # 2) Insert (la constraint del storage decide en caso de carrera).
        # ---------------------------------------------------------------------
        created = self._repository.insert(
            NewUser(
                name=payload.name,
                email=payload.email,
                status=payload.status,
                age=payload.age,
            )
        )
        if created.status is RepoStatus.OK:
            return UserResult(user=created.value)
        if created.status is RepoStatus.DUPLICATE_KEY:
            return UserResult(error=conflict_error())
        return UserResult(error=internal_error(created.detail))
