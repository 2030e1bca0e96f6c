"""In-process store for local development and tests.

Evaluates the same ``Predicate`` objects the Supabase store sends to
PostgREST, so filter semantics can be exercised without a database.
"""

import copy
import re
import threading
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..query import predicates as p
from ..query.predicates import Order, Predicate
from .base import Record, Store

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _comparable(value: Any) -> Any:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str) and _ISO_DATE.match(value):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _compare(op: str, left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    left, right = _comparable(left), _comparable(right)
    try:
        if op == p.GT:
            return left > right
        if op == p.GTE:
            return left >= right
        if op == p.LT:
            return left < right
        return left <= right
    except TypeError:
        return False


def matches(row: Record, pred: Predicate) -> bool:
    """Evaluate one predicate against a row."""
    if pred.op == p.SEARCH:
        term = str(pred.value).lower()
        return any(term in str(row.get(column) or "").lower() for column in pred.column)

    current = row.get(pred.column)
    if pred.op == p.EQ:
        return _comparable(current) == _comparable(pred.value)
    if pred.op == p.NEQ:
        return current is not None and _comparable(current) != _comparable(pred.value)
    if pred.op == p.IN:
        return _comparable(current) in {_comparable(v) for v in pred.value}
    if pred.op == p.IS_NULL:
        return current is None or current == ""
    return _compare(pred.op, current, pred.value)


def _sort_key(value: Any) -> Any:
    value = _comparable(value)
    if isinstance(value, str):
        return value.lower()
    return value


class MemoryStore(Store):
    """Thread-safe dict-of-dicts store."""

    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Record]] = defaultdict(dict)
        self._lock = threading.RLock()

    def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Record]:
        with self._lock:
            rows = [
                row for row in self._tables[table].values()
                if all(matches(row, pred) for pred in predicates)
            ]
            if order is not None:
                present = [row for row in rows if row.get(order.column) is not None]
                missing = [row for row in rows if row.get(order.column) is None]
                present.sort(key=lambda row: _sort_key(row[order.column]), reverse=order.descending)
                rows = present + missing
            if limit is not None:
                rows = rows[offset:offset + limit]
            elif offset:
                rows = rows[offset:]
            return copy.deepcopy(rows)

    def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        with self._lock:
            return sum(
                1 for row in self._tables[table].values()
                if all(matches(row, pred) for pred in predicates)
            )

    def insert(self, table: str, record: Record) -> Record:
        with self._lock:
            row = copy.deepcopy(record)
            row.setdefault("id", str(uuid.uuid4()))
            self._tables[table][row["id"]] = row
            return copy.deepcopy(row)

    def update(self, table: str, record_id: str, changes: Record) -> Optional[Record]:
        with self._lock:
            row = self._tables[table].get(record_id)
            if row is None:
                return None
            row.update(copy.deepcopy(changes))
            return copy.deepcopy(row)

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            return self._tables[table].pop(record_id, None) is not None
