# core/pagination.py

import math
from typing import Any, Callable, Dict, Optional

from django.conf import settings


def parse_page_params(page: Any = 1, page_size: Any = None):
    """Coerce query-string page params into sane integers."""
    config = getattr(settings, "PAGINATION_CONFIG", {})
    default_size = config.get("DEFAULT_PAGE_SIZE", 20)
    max_size = config.get("MAX_PAGE_SIZE", 100)

    try:
        page = max(int(page), 1)
    except (TypeError, ValueError):
        page = 1

    try:
        page_size = int(page_size) if page_size is not None else default_size
    except (TypeError, ValueError):
        page_size = default_size

    return page, min(max(page_size, 1), max_size)


def paginate_queryset(queryset, page: int, page_size: int,
                      serialize: Optional[Callable] = None) -> Dict[str, Any]:
    """
    Offset pagination returning the envelope used by list endpoints:
    {items, total_count, total_pages, current_page, page_size}
    """
    total_count = queryset.count()
    offset = (page - 1) * page_size
    rows = list(queryset[offset:offset + page_size])

    return {
        "items": [serialize(r) for r in rows] if serialize else rows,
        "total_count": total_count,
        "total_pages": math.ceil(total_count / page_size) if page_size else 0,
        "current_page": page,
        "page_size": page_size,
    }
