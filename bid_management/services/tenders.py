"""Tender CRUD, listing and assignment."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from ..auth import allowed_actions, can_edit, require
from ..auth.permissions import ASSIGN_ROLES, DELETE_ROLES
from ..database.base import TENDER_ASSIGNMENTS, TENDERS, USERS, Store
from ..errors import InvalidRequestError, NotFoundError, PermissionDeniedError
from ..formatting import format_inr
from ..importer.dedup import tender_hash
from ..models import (
    AssignmentStatus,
    AssignRequest,
    Tender,
    TenderAssignment,
    TenderCreate,
    TenderDetail,
    TenderPage,
    TenderUpdate,
    User,
)
from ..query import build_pagination, build_tender_query
from ..query.predicates import Order, eq, in_
from . import activity as act
from .activity import ActivityLogger

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNMENT_DAYS = 7


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TenderService:
    """Operations on the ``tenders`` table and its assignment history."""

    def __init__(self, store: Store, activity: ActivityLogger) -> None:
        self._store = store
        self._activity = activity

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_tenders(self, params: Mapping[str, Any], now: Optional[datetime] = None) -> TenderPage:
        """Filtered, sorted, paginated listing.

        The page and the total are computed from the same predicate set; only
        the page query carries LIMIT/OFFSET.
        """
        query = build_tender_query(params, now)
        rows = self._store.select(
            TENDERS,
            query.predicates,
            order=query.order,
            limit=query.limit,
            offset=query.offset,
        )
        total = self._store.count(TENDERS, query.predicates)
        return TenderPage(
            data=[Tender.model_validate(row) for row in rows],
            pagination=build_pagination(query.page, query.limit, total),
        )

    def get_tender(self, tender_id: str) -> Tender:
        row = self._store.get(TENDERS, tender_id)
        if row is None:
            raise NotFoundError("Tender not found")
        return Tender.model_validate(row)

    def get_detail(self, tender_id: str, user: User) -> TenderDetail:
        tender = self.get_tender(tender_id)
        return TenderDetail(
            **tender.model_dump(),
            actions=allowed_actions(user, tender),
            value_display=format_inr(tender.value),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_tender(self, data: TenderCreate, user: User) -> Tender:
        tender = Tender(**data.model_dump())
        tender.dedup_hash = tender_hash(tender.reference_number, tender.title, tender.organization)
        if tender.reference_number and self._store.find_one(TENDERS, "reference_number", tender.reference_number):
            raise InvalidRequestError("A tender with this reference number already exists")

        self._store.insert(TENDERS, tender.to_record())
        logger.info(f"Created tender {tender.id} ({tender.title})")
        self._activity.log(tender.id, act.TENDER_CREATED, user.id, {"title": tender.title}, "Tender created")
        return tender

    def update_tender(self, tender_id: str, changes: TenderUpdate, user: User) -> Tender:
        current = self.get_tender(tender_id)
        if not can_edit(user, current):
            raise PermissionDeniedError("Insufficient permissions to edit this tender")

        update = changes.model_dump(mode="json", exclude_unset=True)
        if not update:
            return current
        update["updated_at"] = _now().isoformat()
        try:
            Tender.model_validate({**current.to_record(), **update})
        except ValidationError as e:
            raise InvalidRequestError("Invalid tender update", details=[
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]} for err in e.errors()
            ]) from e
        row = self._store.update(TENDERS, tender_id, update)
        if row is None:
            raise NotFoundError("Tender not found")
        updated = Tender.model_validate(row)

        if changes.status is not None and changes.status != current.status:
            self._activity.log(tender_id, act.STATUS_CHANGED, user.id, {
                "oldStatus": current.status.value,
                "newStatus": updated.status.value,
            })
        if changes.deadline is not None and changes.deadline > current.deadline:
            self._activity.log(tender_id, act.DEADLINE_EXTENDED, user.id, {
                "oldDeadline": current.deadline.isoformat(),
                "newDeadline": updated.deadline.isoformat(),
            })
        other_fields = sorted(set(update) - {"status", "deadline", "updated_at"})
        if other_fields:
            self._activity.log(tender_id, act.TENDER_UPDATED, user.id, {"fields": other_fields},
                               f"Updated {', '.join(other_fields)}")
        return updated

    def set_ai_score(self, tender_id: str, score: int) -> Tender:
        row = self._store.update(TENDERS, tender_id, {"ai_score": score, "updated_at": _now().isoformat()})
        if row is None:
            raise NotFoundError("Tender not found")
        return Tender.model_validate(row)

    def delete_tender(self, tender_id: str, user: User) -> None:
        require(user, DELETE_ROLES, "delete tenders")
        tender = self.get_tender(tender_id)
        self._activity.log(tender_id, act.TENDER_DELETED, user.id, {"title": tender.title})
        if not self._store.delete(TENDERS, tender_id):
            raise NotFoundError("Tender not found")
        logger.info(f"Deleted tender {tender_id} by {user.username}")

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign(self, tender_id: str, request: AssignRequest, user: User) -> Tender:
        require(user, ASSIGN_ROLES, "assign tenders")
        self.get_tender(tender_id)
        if self._store.get(USERS, request.assigned_to) is None:
            raise NotFoundError("Assignee not found")

        now = _now()
        assignment = TenderAssignment(
            tender_id=tender_id,
            assigned_to=request.assigned_to,
            assigned_by=user.id,
            priority=request.priority,
            budget=request.budget,
            notes=request.notes,
            due_date=request.due_date or now + timedelta(days=DEFAULT_ASSIGNMENT_DAYS),
        )
        self._cancel_open_assignments(tender_id)
        self._store.insert(TENDER_ASSIGNMENTS, assignment.to_record())
        row = self._store.update(TENDERS, tender_id, {
            "assigned_to": request.assigned_to,
            "assigned_by": user.id,
            "assigned_at": now.isoformat(),
            "updated_at": now.isoformat(),
        })
        logger.info(f"Assigned tender {tender_id} to {request.assigned_to}")
        self._activity.log(tender_id, act.TENDER_ASSIGNED, user.id, {
            "assignedTo": request.assigned_to,
            "priority": request.priority.value,
            "budget": request.budget,
        })
        return Tender.model_validate(row)

    def unassign(self, tender_id: str, user: User) -> Tender:
        require(user, ASSIGN_ROLES, "remove assignments")
        tender = self.get_tender(tender_id)
        if not tender.assigned_to:
            raise InvalidRequestError("Tender is not assigned")

        self._cancel_open_assignments(tender_id)
        row = self._store.update(TENDERS, tender_id, {
            "assigned_to": None,
            "assigned_by": None,
            "assigned_at": None,
            "updated_at": _now().isoformat(),
        })
        self._activity.log(tender_id, act.ASSIGNMENT_REMOVED, user.id, {"previousAssignee": tender.assigned_to})
        return Tender.model_validate(row)

    def list_assignments(self, tender_id: str) -> List[TenderAssignment]:
        self.get_tender(tender_id)
        rows = self._store.select(
            TENDER_ASSIGNMENTS,
            [eq("tender_id", tender_id)],
            order=Order("assigned_at", descending=True),
        )
        return [TenderAssignment.model_validate(row) for row in rows]

    def _cancel_open_assignments(self, tender_id: str) -> None:
        open_rows = self._store.select(TENDER_ASSIGNMENTS, [
            eq("tender_id", tender_id),
            in_("status", [AssignmentStatus.ASSIGNED.value, AssignmentStatus.ACCEPTED.value,
                           AssignmentStatus.IN_PROGRESS.value]),
        ])
        for row in open_rows:
            self._store.update(TENDER_ASSIGNMENTS, row["id"], {"status": AssignmentStatus.CANCELLED.value})

    def add_comment(self, tender_id: str, comment: str, user: User):
        self.get_tender(tender_id)
        return self._activity.log(tender_id, act.COMMENT_ADDED, user.id, {"comment": comment}, comment)
