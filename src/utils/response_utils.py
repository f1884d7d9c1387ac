from math import ceil
from typing import Any, Dict


def build_pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_pages = ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def page_offset(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit
