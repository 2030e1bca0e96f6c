"""Uploaded documents (tender RFPs, bid drafts, company certificates)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class DocumentCategory(str, Enum):
    RFP_DOCUMENT = "rfp_document"
    BID_DOCUMENT = "bid_document"
    SUPPORTING_DOCUMENT = "supporting_document"
    COMPANY_DOCUMENT = "company_document"


class Document(ApiModel):
    id: str = Field(default_factory=new_id)
    tender_id: Optional[str] = Field(None, description="None for company-level documents")
    filename: str = Field(..., description="Name on disk under the upload directory")
    original_name: str
    mime_type: str
    size: int
    category: DocumentCategory = DocumentCategory.RFP_DOCUMENT
    uploaded_by: Optional[str] = None
    uploaded_at: datetime = Field(default_factory=utc_now)
