"""
===============================================================================
USE CASE: List Users (Paginated + Filtered)
===============================================================================

Business Goal:
    Listar usuarios con paginación por página, orden configurable y filtro
    opcional por status, devolviendo la metadata de navegación.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    ListUsersUseCase

Responsibilities:
    - Construir el filtro (status opcional) y el offset desde page/limit.
    - Delegar page + count a UserRepository.find_many.
    - Calcular PageInfo (totalPages, hasNextPage, hasPrevPage).

Collaborators:
    - UserRepository.find_many
    - crosscutting.pagination: page_offset / build_page_info
    - PaginationParams (ya validados)
===============================================================================
"""

from __future__ import annotations

from ....crosscutting.pagination import build_page_info, page_offset
from ....domain.repositories import RepoStatus, UserFilter, UserRepository
from ...validation import PaginationParams
from .user_results import ListUsersResult, internal_error


class ListUsersUseCase:
    """Query: listado paginado de usuarios."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def execute(self, params: PaginationParams) -> ListUsersResult:
        # 1) Filtro + ventana.
        user_filter = UserFilter(status=params.status)
        offset = page_offset(params.page, params.limit)

        # 2) Page + total sobre el mismo filtro.
        result = self._repository.find_many(
            user_filter, params.sort_keys, offset, params.limit
        )
        if result.status is not RepoStatus.OK or result.value is None:
            return ListUsersResult(error=internal_error(result.detail))

        # 3) Metadata de navegación.
        page = result.value
        return ListUsersResult(
            users=list(page.items),
            page_info=build_page_info(
                page=params.page, limit=params.limit, total=page.total
            ),
        )
