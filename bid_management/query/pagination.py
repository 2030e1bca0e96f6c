"""Pagination parameter parsing and response metadata."""

import math
from typing import Any, Optional

from ..models import Pagination

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def parse_int(
    value: Any,
    default: int,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """Parse a query-string integer, falling back to ``default`` on junk input."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    if minimum is not None and parsed < minimum:
        parsed = minimum
    if maximum is not None and parsed > maximum:
        parsed = maximum
    return parsed


def parse_page(value: Any) -> int:
    return parse_int(value, DEFAULT_PAGE, minimum=1)


def parse_limit(value: Any) -> int:
    return parse_int(value, DEFAULT_LIMIT, minimum=1, maximum=MAX_LIMIT)


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Compute page metadata for ``total`` matching rows."""
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
