"""Not-relevant approval sub-workflow.

Any user can ask for a tender to be dropped from the pipeline; an admin
approves (tender is cancelled) or rejects (tender untouched).
"""

import logging
from datetime import datetime, timezone
from typing import List

from ..auth import require
from ..auth.permissions import NOT_RELEVANT_APPROVER_ROLES
from ..database.base import TENDERS, Store
from ..errors import InvalidRequestError, NotFoundError
from ..models import ApprovalStatus, NotRelevantDecision, NotRelevantRequest, Tender, TenderStatus, User
from ..query.predicates import Order, eq
from . import activity as act
from .activity import ActivityLogger

logger = logging.getLogger(__name__)


class NotRelevantService:
    def __init__(self, store: Store, activity: ActivityLogger) -> None:
        self._store = store
        self._activity = activity

    def _load(self, tender_id: str) -> Tender:
        row = self._store.get(TENDERS, tender_id)
        if row is None:
            raise NotFoundError("Tender not found")
        return Tender.model_validate(row)

    def request(self, tender_id: str, body: NotRelevantRequest, user: User) -> Tender:
        """Open a not-relevant request. Clears any earlier decision."""
        tender = self._load(tender_id)
        if tender.not_relevant_status == ApprovalStatus.PENDING:
            raise InvalidRequestError("A not-relevant request is already pending for this tender")
        if tender.not_relevant_status == ApprovalStatus.APPROVED:
            raise InvalidRequestError("Tender is already marked as not relevant")

        now = datetime.now(timezone.utc).isoformat()
        row = self._store.update(TENDERS, tender_id, {
            "not_relevant_status": ApprovalStatus.PENDING.value,
            "not_relevant_reason": body.reason,
            "not_relevant_requested_by": user.id,
            "not_relevant_requested_at": now,
            "not_relevant_approved_by": None,
            "not_relevant_approved_at": None,
            "not_relevant_comments": None,
            "updated_at": now,
        })
        logger.info(f"Not-relevant requested for tender {tender_id} by {user.username}")
        self._activity.log(tender_id, act.MARKED_NOT_RELEVANT, user.id, {"reason": body.reason})
        return Tender.model_validate(row)

    def decide(self, tender_id: str, decision: NotRelevantDecision, user: User) -> Tender:
        """Approve or reject the pending request (admin only)."""
        require(user, NOT_RELEVANT_APPROVER_ROLES, "approve not-relevant requests")
        tender = self._load(tender_id)
        if tender.not_relevant_status != ApprovalStatus.PENDING:
            raise InvalidRequestError("No pending not-relevant request for this tender")

        now = datetime.now(timezone.utc).isoformat()
        changes = {
            "not_relevant_approved_by": user.id,
            "not_relevant_approved_at": now,
            "not_relevant_comments": decision.comments,
            "updated_at": now,
        }
        if decision.action == "approve":
            changes["not_relevant_status"] = ApprovalStatus.APPROVED.value
            changes["status"] = TenderStatus.CANCELLED.value
        else:
            changes["not_relevant_status"] = ApprovalStatus.REJECTED.value

        row = self._store.update(TENDERS, tender_id, changes)
        decided = "approved" if decision.action == "approve" else "rejected"
        logger.info(f"Not-relevant request for tender {tender_id} {decided} by {user.username}")
        self._activity.log(tender_id, act.NOT_RELEVANT_DECIDED, user.id, {
            "decision": decided,
            "comments": decision.comments,
        })
        return Tender.model_validate(row)

    def list_pending(self, user: User) -> List[Tender]:
        require(user, NOT_RELEVANT_APPROVER_ROLES, "view not-relevant requests")
        rows = self._store.select(
            TENDERS,
            [eq("not_relevant_status", ApprovalStatus.PENDING.value)],
            order=Order("not_relevant_requested_at", descending=True),
        )
        return [Tender.model_validate(row) for row in rows]
