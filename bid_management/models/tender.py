"""Tender - the procurement opportunity tracked through the bidding workflow."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from .base import ApiModel, new_id, utc_now


class TenderStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    UNDER_EVALUATION = "under_evaluation"
    WON = "won"
    LOST = "lost"
    CANCELLED = "cancelled"
    MISSED_OPPORTUNITY = "missed_opportunity"


# Statuses that still count as live pipeline work
ACTIVE_STATUSES = (TenderStatus.DRAFT, TenderStatus.PUBLISHED, TenderStatus.IN_PROGRESS)


class TenderSource(str, Enum):
    GEM = "gem"
    NON_GEM = "non_gem"
    PORTAL = "portal"
    DIRECT = "direct"
    REFERRAL = "referral"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def clamp_score(score: Any) -> int:
    """Clamp an externally supplied score to the 0-100 integer range."""
    try:
        value = int(round(float(score)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, value))


class Tender(ApiModel):
    """Tender record as stored in the ``tenders`` table.

    ``value`` and ``estimated_value`` are integer minor units (paise).
    """

    id: str = Field(default_factory=new_id)
    reference_number: Optional[str] = Field(None, description="Issuer's reference / tender ID")
    dedup_hash: Optional[str] = Field(None, description="SHA256 of reference number or title+organization")

    # Descriptive
    title: str
    organization: str
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None

    # Commercial
    value: int = Field(0, ge=0, description="Tender value in minor units")
    currency: str = "INR"
    estimated_value: Optional[int] = Field(None, ge=0)
    win_probability: Optional[float] = Field(None, ge=0, le=100)

    # Temporal
    deadline: datetime
    publish_date: Optional[datetime] = None
    submission_deadline: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    # Workflow
    status: TenderStatus = TenderStatus.DRAFT
    source: TenderSource = TenderSource.NON_GEM
    ai_score: Optional[int] = 0
    assigned_to: Optional[str] = None
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None

    # Not-relevant sub-workflow (status is None until a request is made)
    not_relevant_reason: Optional[str] = None
    not_relevant_requested_by: Optional[str] = None
    not_relevant_requested_at: Optional[datetime] = None
    not_relevant_approved_by: Optional[str] = None
    not_relevant_approved_at: Optional[datetime] = None
    not_relevant_comments: Optional[str] = None
    not_relevant_status: Optional[ApprovalStatus] = None

    requirements: List[Any] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    bid_content: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TenderCreate(ApiModel):
    """Body of ``POST /api/tenders``."""

    reference_number: Optional[str] = None
    title: str = Field(..., min_length=1)
    organization: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None
    value: int = Field(..., ge=0)
    currency: str = "INR"
    estimated_value: Optional[int] = Field(None, ge=0)
    deadline: datetime
    publish_date: Optional[datetime] = None
    submission_deadline: Optional[datetime] = None
    status: TenderStatus = TenderStatus.DRAFT
    source: TenderSource = TenderSource.NON_GEM
    requirements: List[Any] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "organization")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TenderUpdate(ApiModel):
    """Body of ``PUT /api/tenders/{id}``; only fields that are sent are applied."""

    reference_number: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1)
    organization: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None
    value: Optional[int] = Field(None, ge=0)
    estimated_value: Optional[int] = Field(None, ge=0)
    win_probability: Optional[float] = Field(None, ge=0, le=100)
    deadline: Optional[datetime] = None
    publish_date: Optional[datetime] = None
    submission_deadline: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    status: Optional[TenderStatus] = None
    source: Optional[TenderSource] = None
    requirements: Optional[List[Any]] = None
    tags: Optional[List[str]] = None
    bid_content: Optional[str] = None

    @field_validator("title", "organization", "value", "deadline", "status", "source", "requirements", "tags")
    @classmethod
    def _not_null(cls, v: Any) -> Any:
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if v is None:
            raise ValueError("must not be null")
        return v


class NotRelevantRequest(ApiModel):
    reason: str = Field(..., min_length=1)


class NotRelevantDecision(ApiModel):
    action: Literal["approve", "reject"]
    comments: Optional[str] = None


class TenderDetail(Tender):
    """Tender plus the caller's permitted actions."""

    actions: Dict[str, bool] = Field(default_factory=dict)
    value_display: Optional[str] = None
