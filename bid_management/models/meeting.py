"""Pre-bid and internal meetings attached to a tender."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Meeting(ApiModel):
    id: str = Field(default_factory=new_id)
    tender_id: str
    title: str
    description: Optional[str] = None
    meeting_date: datetime
    meeting_link: Optional[str] = None
    host_user_id: Optional[str] = None
    mom_writer_id: Optional[str] = None
    status: MeetingStatus = MeetingStatus.SCHEDULED
    minutes: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)


class MeetingCreate(ApiModel):
    tender_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    meeting_date: datetime
    meeting_link: Optional[str] = Field(None, pattern=r"^https?://")
    mom_writer_id: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)


class MeetingUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    meeting_date: Optional[datetime] = None
    meeting_link: Optional[str] = Field(None, pattern=r"^https?://")
    mom_writer_id: Optional[str] = None
    status: Optional[MeetingStatus] = None
    minutes: Optional[str] = None
    attendees: Optional[List[str]] = None
