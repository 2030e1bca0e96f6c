"""Tender list query builder.

Translates free-form query-string parameters into a ``TenderQuery``: a
predicate set, a whitelisted sort order and LIMIT/OFFSET values. The same
predicate set drives both the page query and the total count.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional, Tuple

from . import predicates as p
from .pagination import parse_limit, parse_page
from .predicates import Order, Predicate

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = ("deadline", "value", "created_at", "title", "organization")
SORT_ALIASES = {"createdAt": "created_at"}
DEFAULT_SORT = "deadline"

SEARCH_COLUMNS = ("title", "organization", "description")

# ai_score at or above this counts as "eligible"
ELIGIBILITY_THRESHOLD = 70

DEADLINE_WINDOWS = ("today", "week", "month", "overdue")

# Filter values meaning "no filter"
_ANY = ("", "all")


@dataclass(frozen=True)
class TenderQuery:
    """Fully resolved list query."""

    predicates: Tuple[Predicate, ...]
    order: Order
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _text(params: Mapping[str, Any], key: str) -> Optional[str]:
    value = params.get(key)
    if value is None:
        return None
    value = str(value).strip()
    if value.lower() in _ANY:
        return None
    return value


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring unparseable date filter {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(params: Mapping[str, Any], key: str) -> Optional[int]:
    raw = _text(params, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.debug(f"Ignoring non-integer {key} filter {raw!r}")
        return None


def resolve_sort(sort_by: Any, sort_order: Any) -> Order:
    """Whitelist the sort column; anything unsupported falls back to deadline."""
    column = SORT_ALIASES.get(str(sort_by), str(sort_by)) if sort_by else DEFAULT_SORT
    if column not in SORTABLE_COLUMNS:
        logger.debug(f"Unsupported sortBy {sort_by!r}, using {DEFAULT_SORT}")
        column = DEFAULT_SORT
    descending = str(sort_order or "").lower() == "desc"
    return Order(column=column, descending=descending)


def _deadline_window(window: str, now: datetime) -> List[Predicate]:
    if window == "today":
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return [p.gte("deadline", start.isoformat()), p.lt("deadline", (start + timedelta(days=1)).isoformat())]
    if window == "week":
        return [p.gte("deadline", now.isoformat()), p.lte("deadline", (now + timedelta(days=7)).isoformat())]
    if window == "month":
        return [p.gte("deadline", now.isoformat()), p.lte("deadline", (now + timedelta(days=30)).isoformat())]
    if window == "overdue":
        return [p.lt("deadline", now.isoformat())]
    return []


def build_predicates(params: Mapping[str, Any], now: Optional[datetime] = None) -> List[Predicate]:
    """Build the filter predicate list for the tender table.

    Args:
        params: Query parameters (camelCase keys as sent by the frontend).
        now: Reference time for relative deadline windows.

    Returns:
        Predicates to AND together. Empty when no filter applies.
    """
    now = now or datetime.now(timezone.utc)
    conditions: List[Predicate] = []

    status = _text(params, "status")
    if status:
        statuses = [s.strip() for s in status.split(",") if s.strip()]
        if len(statuses) == 1:
            conditions.append(p.eq("status", statuses[0]))
        elif statuses:
            conditions.append(p.in_("status", statuses))

    for key, column in (("source", "source"), ("category", "category"), ("organization", "organization")):
        value = _text(params, key)
        if value:
            conditions.append(p.eq(column, value))

    assigned_to = _text(params, "assignedTo")
    if assigned_to == "unassigned":
        conditions.append(p.is_null("assigned_to"))
    elif assigned_to:
        conditions.append(p.eq("assigned_to", assigned_to))

    term = _text(params, "search")
    if term:
        conditions.append(p.search(SEARCH_COLUMNS, term))

    min_value = _optional_int(params, "minValue")
    if min_value is not None:
        conditions.append(p.gte("value", min_value))
    max_value = _optional_int(params, "maxValue")
    if max_value is not None:
        conditions.append(p.lte("value", max_value))

    deadline_from = _parse_datetime(_text(params, "deadlineFrom"))
    if deadline_from:
        conditions.append(p.gte("deadline", deadline_from.isoformat()))
    deadline_to = _parse_datetime(_text(params, "deadlineTo"))
    if deadline_to:
        conditions.append(p.lte("deadline", deadline_to.isoformat()))

    window = _text(params, "deadline")
    if window in DEADLINE_WINDOWS:
        conditions.extend(_deadline_window(window, now))

    eligibility = _text(params, "eligibility")
    if eligibility == "eligible":
        conditions.append(p.gte("ai_score", ELIGIBILITY_THRESHOLD))
    elif eligibility == "not_eligible":
        conditions.append(p.lt("ai_score", ELIGIBILITY_THRESHOLD))

    not_relevant = _text(params, "notRelevantStatus")
    if not_relevant:
        conditions.append(p.eq("not_relevant_status", not_relevant))

    return conditions


def build_tender_query(params: Mapping[str, Any], now: Optional[datetime] = None) -> TenderQuery:
    """Resolve filters, sort and pagination from raw query parameters."""
    return TenderQuery(
        predicates=tuple(build_predicates(params, now)),
        order=resolve_sort(params.get("sortBy"), params.get("sortOrder")),
        page=parse_page(params.get("page")),
        limit=parse_limit(params.get("limit")),
    )
