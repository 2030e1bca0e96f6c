"""Filter, sort and pagination building for tender listings."""

from .builder import (
    DEFAULT_SORT,
    SEARCH_COLUMNS,
    SORTABLE_COLUMNS,
    TenderQuery,
    build_predicates,
    build_tender_query,
    resolve_sort,
)
from .pagination import DEFAULT_LIMIT, MAX_LIMIT, build_pagination, parse_int
from .predicates import Order, Predicate

__all__ = [
    "DEFAULT_SORT",
    "SEARCH_COLUMNS",
    "SORTABLE_COLUMNS",
    "TenderQuery",
    "build_predicates",
    "build_tender_query",
    "resolve_sort",
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "build_pagination",
    "parse_int",
    "Order",
    "Predicate",
]
