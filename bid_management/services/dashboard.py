"""Dashboard summary statistics."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..database.base import FINANCE_REQUESTS, TENDERS, Store
from ..models import ApprovalStatus, DashboardStats, FinanceRequestStatus, TenderStatus
from ..models.tender import ACTIVE_STATUSES
from ..query.predicates import eq, gte, in_, lte

UPCOMING_DAYS = 7


def compute_stats(store: Store, now: Optional[datetime] = None) -> DashboardStats:
    now = now or datetime.now(timezone.utc)
    active = [s.value for s in ACTIVE_STATUSES]

    active_rows = store.select(TENDERS, [in_("status", active)])
    scored = [row["ai_score"] for row in store.select(TENDERS) if row.get("ai_score") is not None]
    won = store.count(TENDERS, [eq("status", TenderStatus.WON.value)])
    lost = store.count(TENDERS, [eq("status", TenderStatus.LOST.value)])
    decided = won + lost

    return DashboardStats(
        active_tenders=len(active_rows),
        total_value=sum(row.get("value") or 0 for row in active_rows),
        total_won=won,
        total_lost=lost,
        win_rate=round(won * 100.0 / decided, 1) if decided else 0.0,
        average_ai_score=round(sum(scored) / len(scored), 1) if scored else 0.0,
        pending_approvals=store.count(TENDERS, [eq("not_relevant_status", ApprovalStatus.PENDING.value)]),
        pending_finance_requests=store.count(
            FINANCE_REQUESTS, [eq("status", FinanceRequestStatus.PENDING.value)]
        ),
        upcoming_deadlines=store.count(TENDERS, [
            in_("status", active),
            gte("deadline", now.isoformat()),
            lte("deadline", (now + timedelta(days=UPCOMING_DAYS)).isoformat()),
        ]),
    )
