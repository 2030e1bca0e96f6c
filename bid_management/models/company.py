"""Company profile used for AI match scoring."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel, utc_now

COMPANY_SETTINGS_ID = "default"


class CompanySettings(ApiModel):
    id: str = COMPANY_SETTINGS_ID
    company_name: str = ""
    turnover_criteria: str = Field("", description='Annual turnover, e.g. "5 cr"')
    headquarters: Optional[str] = None
    established_year: Optional[int] = None
    certifications: List[str] = Field(default_factory=list)
    business_sectors: List[str] = Field(default_factory=list)
    project_types: List[str] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utc_now)
    updated_by: Optional[str] = None


class CompanySettingsUpdate(ApiModel):
    company_name: Optional[str] = None
    turnover_criteria: Optional[str] = None
    headquarters: Optional[str] = None
    established_year: Optional[int] = None
    certifications: Optional[List[str]] = None
    business_sectors: Optional[List[str]] = None
    project_types: Optional[List[str]] = None
