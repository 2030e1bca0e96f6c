"""History of spreadsheet imports."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class UploadStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ExcelUpload(ApiModel):
    id: str = Field(default_factory=new_id)
    file_name: str
    file_path: str
    uploaded_by: Optional[str] = None
    uploaded_at: datetime = Field(default_factory=utc_now)
    entries_added: int = 0
    entries_rejected: int = 0
    entries_duplicate: int = 0
    entries_updated: int = 0
    total_entries: int = 0
    sheets_processed: int = 0
    status: UploadStatus = UploadStatus.PROCESSING
    error_log: Optional[str] = None
    processing_time: Optional[int] = Field(None, description="Milliseconds")
