"""Activity log entries shown on the tender timeline."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class ActivityLog(ApiModel):
    id: str = Field(default_factory=new_id)
    tender_id: str
    activity_type: str
    description: str
    created_by: str
    details: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    action_label: Optional[str] = None


class CommentCreate(ApiModel):
    comment: str = Field(..., min_length=1)
