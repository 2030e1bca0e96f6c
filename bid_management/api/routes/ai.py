"""AI-assist endpoints. Upstream JSON is returned as received."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...models import (
    AnalyzeTenderRequest,
    GenerateBidRequest,
    OptimizeBidRequest,
    PricingRequest,
    RiskRequest,
    User,
    clamp_score,
)
from ..container import Services
from ..deps import current_user, get_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/analyze-tender")
def analyze_tender(body: AnalyzeTenderRequest, user: User = Depends(current_user),
                   services: Services = Depends(get_services)) -> Dict[str, Any]:
    result = services.ai.analyze_tender(body.tender_description, body.company_capabilities)
    if body.tender_id and "score" in result:
        services.tenders.set_ai_score(body.tender_id, clamp_score(result["score"]))
        logger.info(f"Stored AI score for tender {body.tender_id}")
    return result


@router.post("/generate-bid")
def generate_bid(body: GenerateBidRequest, user: User = Depends(current_user),
                 services: Services = Depends(get_services)) -> Dict[str, Any]:
    content = services.ai.generate_bid(body.tender_description, body.company_profile, body.requirements)
    return {"content": content}


@router.post("/optimize-bid")
def optimize_bid(body: OptimizeBidRequest, user: User = Depends(current_user),
                 services: Services = Depends(get_services)) -> Dict[str, Any]:
    return services.ai.optimize_bid(body.current_content, body.tender_requirements)


@router.post("/pricing-suggestion")
def pricing_suggestion(body: PricingRequest, user: User = Depends(current_user),
                       services: Services = Depends(get_services)) -> Dict[str, Any]:
    return services.ai.suggest_pricing(body.tender_description, body.estimated_costs, body.market_data)


@router.post("/risk-assessment")
def risk_assessment(body: RiskRequest, user: User = Depends(current_user),
                    services: Services = Depends(get_services)) -> Dict[str, Any]:
    return services.ai.assess_risk(body.tender_description, body.deadline, body.tender_value)
