"""Tender meetings."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..database.base import MEETINGS, TENDERS, Store
from ..errors import NotFoundError
from ..models import Meeting, MeetingCreate, MeetingStatus, MeetingUpdate, User
from ..query.predicates import Order, eq, gte

logger = logging.getLogger(__name__)


class MeetingService:
    def __init__(self, store: Store) -> None:
        self._store = store

    def schedule(self, data: MeetingCreate, user: User) -> Meeting:
        if self._store.get(TENDERS, data.tender_id) is None:
            raise NotFoundError("Tender not found")
        meeting = Meeting(host_user_id=user.id, **data.model_dump())
        self._store.insert(MEETINGS, meeting.to_record())
        logger.info(f"Scheduled meeting {meeting.id} for tender {meeting.tender_id}")
        return meeting

    def list_meetings(self, tender_id: Optional[str] = None, upcoming: bool = False,
                      now: Optional[datetime] = None) -> List[Meeting]:
        predicates = []
        if tender_id:
            predicates.append(eq("tender_id", tender_id))
        if upcoming:
            now = now or datetime.now(timezone.utc)
            predicates.append(gte("meeting_date", now.isoformat()))
            predicates.append(eq("status", MeetingStatus.SCHEDULED.value))
        rows = self._store.select(MEETINGS, predicates, order=Order("meeting_date"))
        return [Meeting.model_validate(row) for row in rows]

    def get_meeting(self, meeting_id: str) -> Meeting:
        row = self._store.get(MEETINGS, meeting_id)
        if row is None:
            raise NotFoundError("Meeting not found")
        return Meeting.model_validate(row)

    def update_meeting(self, meeting_id: str, changes: MeetingUpdate) -> Meeting:
        self.get_meeting(meeting_id)
        update = changes.model_dump(mode="json", exclude_unset=True)
        if not update:
            return self.get_meeting(meeting_id)
        row = self._store.update(MEETINGS, meeting_id, update)
        return Meeting.model_validate(row)
