"""TenderAssignment - history of who was asked to bid on a tender."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class AssignmentPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TenderAssignment(ApiModel):
    id: str = Field(default_factory=new_id)
    tender_id: str
    assigned_to: str
    assigned_by: str
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    status: AssignmentStatus = AssignmentStatus.ASSIGNED
    budget: Optional[int] = Field(None, ge=0, description="Minor units")
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    assigned_at: datetime = Field(default_factory=utc_now)


class AssignRequest(ApiModel):
    assigned_to: str = Field(..., min_length=1)
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    budget: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
