# users_api/crosscutting/pagination.py
"""
===============================================================================
MÓDULO: Utilidades de paginación (page / limit)
===============================================================================

Objetivo
--------
Paginación por número de página, consistente para listados:
- offset derivado de (page, limit)
- metadata currentPage/totalPages/totalUsers/hasNextPage/hasPrevPage/limit

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  PageInfo + page_offset + build_page_info

Responsabilidades:
  - Traducir page -> offset
  - Armar metadata de navegación a partir del total contado
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PageInfo:
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalUsers": self.total_items,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
            "limit": self.limit,
        }


def page_offset(page: int, limit: int) -> int:
    """Offset (skip) para una página 1-based."""
    return (max(1, page) - 1) * limit


def build_page_info(*, page: int, limit: int, total: int) -> PageInfo:
    """
    Metadata de navegación.

    - total_pages = ceil(total / limit) (0 si no hay items)
    - has_next_page = page < total_pages
    - has_prev_page = page > 1 (aunque la página pedida esté fuera de rango)
    """
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return PageInfo(
        current_page=page,
        total_pages=total_pages,
        total_items=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
        limit=limit,
    )
