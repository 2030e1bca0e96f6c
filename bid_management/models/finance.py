"""Finance requests: EMD, PBG and fee payments tied to a tender."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class FinanceRequestType(str, Enum):
    EMD = "emd"
    PBG = "pbg"
    DOCUMENT_FEE = "document_fee"
    OTHER = "other"


class FinanceRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"


class FinanceRequest(ApiModel):
    id: str = Field(default_factory=new_id)
    tender_id: str
    requester_id: str
    type: FinanceRequestType
    amount: int = Field(..., ge=0, description="Minor units")
    description: Optional[str] = None
    status: FinanceRequestStatus = FinanceRequestStatus.PENDING
    approved_by: Optional[str] = None
    comments: Optional[str] = None
    request_date: datetime = Field(default_factory=utc_now)
    approval_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None


class FinanceRequestCreate(ApiModel):
    tender_id: str = Field(..., min_length=1)
    type: FinanceRequestType
    amount: int = Field(..., ge=0)
    description: Optional[str] = None
    expiry_date: Optional[datetime] = None


class FinanceDecision(ApiModel):
    action: Literal["approve", "reject"]
    comments: Optional[str] = None


class FinanceOverview(ApiModel):
    total_requests: int
    pending_amount: int
    approved_amount: int
    emd_blocked: int
    upcoming_expiries: List[FinanceRequest]
