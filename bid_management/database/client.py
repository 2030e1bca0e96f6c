"""Supabase (PostgREST) store for the bid management tables."""

import logging
import os
from enum import Enum
from typing import Any, List, Optional, Sequence

from supabase import Client, create_client

from ..query import predicates as p
from ..query.predicates import Order, Predicate
from .base import Record, Store

logger = logging.getLogger(__name__)

# Matches the default PostgREST db-max-rows on Supabase
PAGE_SIZE = 1000


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _like_pattern(term: str) -> str:
    """Substring ILIKE pattern with LIKE metacharacters escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _quote_filter_value(value: str) -> str:
    # PostgREST logic-tree values containing , . : ( ) must be double-quoted
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def apply_predicates(builder, predicates: Sequence[Predicate]):
    """Apply predicates to a postgrest request builder.

    Values are passed through the builder's filter methods, which encode them as
    query parameters; nothing is spliced into SQL.
    """
    for pred in predicates:
        value = _plain(pred.value)
        if pred.op == p.EQ:
            builder = builder.eq(pred.column, value)
        elif pred.op == p.NEQ:
            builder = builder.neq(pred.column, value)
        elif pred.op == p.GT:
            builder = builder.gt(pred.column, value)
        elif pred.op == p.GTE:
            builder = builder.gte(pred.column, value)
        elif pred.op == p.LT:
            builder = builder.lt(pred.column, value)
        elif pred.op == p.LTE:
            builder = builder.lte(pred.column, value)
        elif pred.op == p.IN:
            builder = builder.in_(pred.column, [_plain(v) for v in value])
        elif pred.op == p.IS_NULL:
            builder = builder.is_(pred.column, "null")
        elif pred.op == p.SEARCH:
            pattern = _quote_filter_value(_like_pattern(str(value)))
            builder = builder.or_(",".join(f"{column}.ilike.{pattern}" for column in pred.column))
    return builder


class SupabaseStore(Store):
    """Store backed by a Supabase project's Postgres tables."""

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        """Initialize Supabase client from explicit args or env vars.

        Args:
            url: Supabase project URL (falls back to SUPABASE_URL env var).
            key: Supabase service key (falls back to SUPABASE_KEY env var).
        """
        self._url = url or os.environ["SUPABASE_URL"]
        self._key = key or os.environ["SUPABASE_KEY"]
        self._client: Client = create_client(self._url, self._key)

    # ------------------------------------------------------------------
    # Store API
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Record]:
        if limit is not None:
            return self._fetch(table, predicates, order, offset, offset + limit - 1)

        # Unranged requests are truncated at the server's max-rows, so read page by page
        order = order or Order("id")
        rows: List[Record] = []
        start = offset
        while True:
            page = self._fetch(table, predicates, order, start, start + PAGE_SIZE - 1)
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                break
            start += PAGE_SIZE
        logger.debug(f"Read {len(rows)} rows from {table}")
        return rows

    def _fetch(self, table: str, predicates: Sequence[Predicate], order: Optional[Order],
               start: int, end: int) -> List[Record]:
        query = apply_predicates(self._client.table(table).select("*"), predicates)
        if order is not None:
            query = query.order(order.column, desc=order.descending)
        response = query.range(start, end).execute()
        return list(response.data or [])

    def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        query = apply_predicates(
            self._client.table(table).select("id", count="exact", head=True),
            predicates,
        )
        response = query.execute()
        return response.count or 0

    def insert(self, table: str, record: Record) -> Record:
        response = self._client.table(table).insert(record).execute()
        logger.debug(f"Inserted into {table}: {record.get('id')}")
        return response.data[0] if response.data else dict(record)

    def update(self, table: str, record_id: str, changes: Record) -> Optional[Record]:
        response = (
            self._client.table(table)
            .update(changes)
            .eq("id", record_id)
            .execute()
        )
        return response.data[0] if response.data else None

    def delete(self, table: str, record_id: str) -> bool:
        response = (
            self._client.table(table)
            .delete()
            .eq("id", record_id)
            .execute()
        )
        return bool(response.data)
