"""Typed filter predicates shared by every store implementation.

Filters are data, not SQL: each store translates a ``Predicate`` into its own
parameter-bound query call (PostgREST builder methods, or a Python check for
the in-memory store).
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union

EQ = "eq"
NEQ = "neq"
GT = "gt"
GTE = "gte"
LT = "lt"
LTE = "lte"
IN = "in"
IS_NULL = "is_null"
SEARCH = "search"

OPERATORS = (EQ, NEQ, GT, GTE, LT, LTE, IN, IS_NULL, SEARCH)


@dataclass(frozen=True)
class Predicate:
    """A single filter condition.

    Attributes:
        op: One of ``OPERATORS``.
        column: Column name, or a tuple of column names for ``search``.
        value: Comparison value; a tuple for ``in``; the search term for ``search``.
    """

    op: str
    column: Union[str, Tuple[str, ...]]
    value: Any = None

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unknown predicate operator: {self.op}")


@dataclass(frozen=True)
class Order:
    column: str
    descending: bool = False


def eq(column: str, value: Any) -> Predicate:
    return Predicate(EQ, column, value)


def neq(column: str, value: Any) -> Predicate:
    return Predicate(NEQ, column, value)


def gt(column: str, value: Any) -> Predicate:
    return Predicate(GT, column, value)


def gte(column: str, value: Any) -> Predicate:
    return Predicate(GTE, column, value)


def lt(column: str, value: Any) -> Predicate:
    return Predicate(LT, column, value)


def lte(column: str, value: Any) -> Predicate:
    return Predicate(LTE, column, value)


def in_(column: str, values) -> Predicate:
    return Predicate(IN, column, tuple(values))


def is_null(column: str) -> Predicate:
    return Predicate(IS_NULL, column)


def search(columns: Tuple[str, ...], term: str) -> Predicate:
    """Case-insensitive substring match OR-combined across ``columns``."""
    return Predicate(SEARCH, tuple(columns), term)
