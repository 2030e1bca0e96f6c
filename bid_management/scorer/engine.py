"""Rule-based company match scoring for tenders.

Compares a tender against the company profile along three dimensions
(turnover eligibility, business sector, certifications) and combines them
with configurable weights. Dimensions the profile cannot evaluate are left
out and the remaining weights are renormalized.
"""

import re
from typing import Any, Iterable, List, Optional

from ..models import CompanySettings, DimensionScore, MatchScore, Tender
from .weights import DEFAULT_WEIGHTS, ScoringWeights

# Multipliers to rupees for common Indian amount suffixes
_UNITS = {
    "cr": 10_000_000,
    "crore": 10_000_000,
    "crores": 10_000_000,
    "l": 100_000,
    "lac": 100_000,
    "lacs": 100_000,
    "lakh": 100_000,
    "lakhs": 100_000,
}

_AMOUNT_RE = re.compile(r"([\d,]*\.?\d+)\s*([a-zA-Z]+)?")


def parse_amount(text: Any) -> Optional[float]:
    """Parse "5 Cr", "50 lakh" or "2,50,00,000" into rupees. None if no number."""
    if text is None:
        return None
    if isinstance(text, (int, float)):
        return float(text)
    match = _AMOUNT_RE.search(str(text))
    if not match:
        return None
    number = float(match.group(1).replace(",", ""))
    unit = (match.group(2) or "").lower()
    return number * _UNITS.get(unit, 1)


def required_turnover(tender: Tender) -> Optional[str]:
    """Turnover requirement text from the tender's metadata or requirement rows."""
    if tender.metadata.get("turnover"):
        return str(tender.metadata["turnover"])
    for item in tender.requirements:
        if isinstance(item, dict) and item.get("turnover"):
            return str(item["turnover"])
    return None


def _tender_text(tender: Tender) -> str:
    parts = [tender.title, tender.description or "", tender.category or ""]
    for item in tender.requirements:
        parts.append(" ".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item))
    return " ".join(parts).lower()


def _first_match(candidates: Iterable[str], text: str) -> List[str]:
    return [c for c in candidates if c and c.lower() in text]


def score_turnover(tender: Tender, company: CompanySettings) -> DimensionScore:
    """Turnover eligibility.

    - No requirement stated: 100
    - Requirement present but unparseable: 85 (manual review)
    - Company meets requirement: 100
    - Otherwise proportional, capped at 80
    """
    requirement = required_turnover(tender)
    if not requirement:
        return DimensionScore(score=100.0, evidence_citations=["No turnover requirement specified"])

    required = parse_amount(requirement) or 0
    if required == 0:
        return DimensionScore(score=85.0, evidence_citations=[f"Turnover requirement needs review: {requirement}"])

    ours = parse_amount(company.turnover_criteria) or 0
    if ours >= required:
        return DimensionScore(
            score=100.0,
            evidence_citations=[f"Company turnover {company.turnover_criteria} meets requirement {requirement}"],
        )
    return DimensionScore(
        score=round(min(ours / required * 80.0, 80.0), 2),
        evidence_citations=[f"Company turnover {company.turnover_criteria or 'not set'} below requirement {requirement}"],
    )


def score_sector(tender: Tender, company: CompanySettings) -> DimensionScore:
    if not company.business_sectors:
        return DimensionScore(score=0.0, evidence_citations=["No business sectors configured"], applicable=False)
    matched = _first_match(company.business_sectors, f"{tender.title} {tender.description or ''}".lower())
    if matched:
        return DimensionScore(score=100.0, evidence_citations=[f"Sector match: {s}" for s in matched[:3]])
    return DimensionScore(score=60.0, evidence_citations=["No business sector mentioned in tender"])


def score_certification(tender: Tender, company: CompanySettings) -> DimensionScore:
    if not company.certifications:
        return DimensionScore(score=0.0, evidence_citations=["No certifications configured"], applicable=False)
    matched = _first_match(company.certifications, _tender_text(tender))
    if matched:
        return DimensionScore(score=100.0, evidence_citations=[f"Certification match: {c}" for c in matched[:3]])
    return DimensionScore(score=70.0, evidence_citations=["No listed certification referenced by tender"])


def score_tender(
    tender: Tender,
    company: CompanySettings,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> MatchScore:
    """Score how well ``tender`` fits ``company``.

    Returns:
        MatchScore with per-dimension evidence and a 0-100 composite
    """
    turnover = score_turnover(tender, company)
    sector = score_sector(tender, company)
    certification = score_certification(tender, company)

    weighted = [
        (turnover, weights.turnover),
        (sector, weights.sector),
        (certification, weights.certification),
    ]
    total_weight = sum(w for dim, w in weighted if dim.applicable)
    if total_weight > 0:
        composite = sum(dim.score * w for dim, w in weighted if dim.applicable) / total_weight
    else:
        composite = 50.0

    return MatchScore(
        tender_id=tender.id,
        turnover=turnover,
        sector=sector,
        certification=certification,
        composite_score=int(round(composite)),
        scoring_weights_version=weights.version,
    )
