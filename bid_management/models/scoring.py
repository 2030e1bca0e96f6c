"""Company match scoring results."""

from datetime import datetime
from typing import List

from pydantic import Field

from .base import ApiModel, utc_now


class DimensionScore(ApiModel):
    """Score for one matching dimension with supporting evidence."""

    score: float = Field(..., ge=0, le=100)
    evidence_citations: List[str] = Field(default_factory=list)
    applicable: bool = Field(True, description="False when the company profile has nothing to compare")


class MatchScore(ApiModel):
    tender_id: str
    turnover: DimensionScore
    sector: DimensionScore
    certification: DimensionScore
    composite_score: int = Field(..., ge=0, le=100)
    scoring_weights_version: str
    scored_at: datetime = Field(default_factory=utc_now)
