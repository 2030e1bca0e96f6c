"""Missed-opportunity sweep.

Unassigned tenders still in draft/published once their deadline has passed
are moved to ``missed_opportunity``.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..database.base import TENDERS, Store
from ..models import TenderStatus
from ..query.predicates import in_, is_null, lt
from . import activity as act
from .activity import SYSTEM_USER, ActivityLogger

logger = logging.getLogger(__name__)

SWEEPABLE_STATUSES = (TenderStatus.DRAFT.value, TenderStatus.PUBLISHED.value)


def sweep_missed_opportunities(store: Store, activity: ActivityLogger,
                               now: Optional[datetime] = None) -> List[str]:
    """Mark expired unassigned tenders as missed. Returns the affected ids."""
    now = now or datetime.now(timezone.utc)
    rows = store.select(TENDERS, [
        in_("status", list(SWEEPABLE_STATUSES)),
        is_null("assigned_to"),
        lt("deadline", now.isoformat()),
    ])

    marked = []
    for row in rows:
        store.update(TENDERS, row["id"], {
            "status": TenderStatus.MISSED_OPPORTUNITY.value,
            "updated_at": now.isoformat(),
        })
        activity.log(row["id"], act.MISSED_OPPORTUNITY, SYSTEM_USER, {
            "deadline": row.get("deadline"),
            "previousStatus": row.get("status"),
        })
        marked.append(row["id"])

    if marked:
        logger.info(f"Marked {len(marked)} tenders as missed opportunities")
    else:
        logger.debug("No missed opportunities found")
    return marked
