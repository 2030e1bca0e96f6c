"""Finance requests (EMD, PBG, document fees) and the finance overview."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Mapping, Optional

from ..auth import require
from ..auth.permissions import FINANCE_APPROVER_ROLES
from ..database.base import FINANCE_REQUESTS, TENDERS, Store
from ..errors import InvalidRequestError, NotFoundError
from ..models import (
    FinanceDecision,
    FinanceOverview,
    FinanceRequest,
    FinanceRequestCreate,
    FinanceRequestStatus,
    FinanceRequestType,
    User,
)
from ..query.predicates import Order, eq

logger = logging.getLogger(__name__)

# Request types whose approved amount stays locked up with the issuer
BLOCKING_TYPES = (FinanceRequestType.EMD, FinanceRequestType.PBG)
EXPIRY_WINDOW_DAYS = 30


class FinanceService:
    def __init__(self, store: Store) -> None:
        self._store = store

    def create_request(self, data: FinanceRequestCreate, user: User) -> FinanceRequest:
        if self._store.get(TENDERS, data.tender_id) is None:
            raise NotFoundError("Tender not found")
        request = FinanceRequest(requester_id=user.id, **data.model_dump())
        self._store.insert(FINANCE_REQUESTS, request.to_record())
        logger.info(f"Finance request {request.id} ({request.type.value}) created for tender {request.tender_id}")
        return request

    def list_requests(self, filters: Optional[Mapping[str, str]] = None) -> List[FinanceRequest]:
        filters = filters or {}
        predicates = []
        for key, column in (("status", "status"), ("type", "type"), ("tenderId", "tender_id"),
                            ("requesterId", "requester_id")):
            value = filters.get(key)
            if value and value != "all":
                predicates.append(eq(column, value))
        rows = self._store.select(FINANCE_REQUESTS, predicates, order=Order("request_date", descending=True))
        return [FinanceRequest.model_validate(row) for row in rows]

    def get_request(self, request_id: str) -> FinanceRequest:
        row = self._store.get(FINANCE_REQUESTS, request_id)
        if row is None:
            raise NotFoundError("Finance request not found")
        return FinanceRequest.model_validate(row)

    def decide(self, request_id: str, decision: FinanceDecision, user: User) -> FinanceRequest:
        require(user, FINANCE_APPROVER_ROLES, "approve finance requests")
        request = self.get_request(request_id)
        if request.status != FinanceRequestStatus.PENDING:
            raise InvalidRequestError(f"Finance request is already {request.status.value}")

        status = FinanceRequestStatus.APPROVED if decision.action == "approve" else FinanceRequestStatus.REJECTED
        row = self._store.update(FINANCE_REQUESTS, request_id, {
            "status": status.value,
            "approved_by": user.id,
            "approval_date": datetime.now(timezone.utc).isoformat(),
            "comments": decision.comments,
        })
        logger.info(f"Finance request {request_id} {status.value} by {user.username}")
        return FinanceRequest.model_validate(row)

    def mark_processed(self, request_id: str, user: User) -> FinanceRequest:
        require(user, FINANCE_APPROVER_ROLES, "process finance requests")
        request = self.get_request(request_id)
        if request.status != FinanceRequestStatus.APPROVED:
            raise InvalidRequestError("Only approved requests can be processed")
        row = self._store.update(FINANCE_REQUESTS, request_id, {"status": FinanceRequestStatus.PROCESSED.value})
        return FinanceRequest.model_validate(row)

    def overview(self, now: Optional[datetime] = None) -> FinanceOverview:
        """Totals across all requests. Amounts are minor units."""
        now = now or datetime.now(timezone.utc)
        horizon = now + timedelta(days=EXPIRY_WINDOW_DAYS)
        requests = [FinanceRequest.model_validate(row) for row in self._store.select(FINANCE_REQUESTS)]

        settled = (FinanceRequestStatus.APPROVED, FinanceRequestStatus.PROCESSED)
        pending_amount = sum(r.amount for r in requests if r.status == FinanceRequestStatus.PENDING)
        approved_amount = sum(r.amount for r in requests if r.status in settled)
        emd_blocked = sum(r.amount for r in requests if r.status in settled and r.type in BLOCKING_TYPES)
        expiring = sorted(
            (r for r in requests if r.status in settled and r.expiry_date and now <= r.expiry_date <= horizon),
            key=lambda r: r.expiry_date,
        )
        return FinanceOverview(
            total_requests=len(requests),
            pending_amount=pending_amount,
            approved_amount=approved_amount,
            emd_blocked=emd_blocked,
            upcoming_expiries=expiring,
        )
