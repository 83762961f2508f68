"""
OGCS CRM - Pagination policy shared by every paginated listing
"""

import math
from typing import Optional, Tuple

from config import PAGE_LIMIT_DEFAULT, PAGE_LIMIT_MAX


def clamp_pagination(page: Optional[int] = None, limit: Optional[int] = None) -> Tuple[int, int]:
    """page >= 1, 1 <= limit <= PAGE_LIMIT_MAX"""
    page = page if page is not None else 1
    limit = limit if limit is not None else PAGE_LIMIT_DEFAULT
    return max(1, page), min(max(1, limit), PAGE_LIMIT_MAX)


def total_pages(total: int, limit: int) -> int:
    return max(1, math.ceil(total / limit))


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages(total, limit),
    }
