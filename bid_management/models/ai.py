"""Request bodies for the AI-assist endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import ApiModel


class AnalyzeTenderRequest(ApiModel):
    tender_description: str = Field(..., min_length=1)
    company_capabilities: List[str] = Field(default_factory=list)
    tender_id: Optional[str] = Field(None, description="When set, the returned score is stored as ai_score")


class GenerateBidRequest(ApiModel):
    tender_description: str = Field(..., min_length=1)
    company_profile: str = ""
    requirements: List[str] = Field(default_factory=list)


class OptimizeBidRequest(ApiModel):
    current_content: str = Field(..., min_length=1)
    tender_requirements: str = ""


class PricingRequest(ApiModel):
    tender_description: str = Field(..., min_length=1)
    estimated_costs: int = Field(..., ge=0, description="Minor units")
    market_data: Optional[str] = None


class RiskRequest(ApiModel):
    tender_description: str = Field(..., min_length=1)
    deadline: datetime
    tender_value: int = Field(..., ge=0, description="Minor units")
