"""Stores company match scores on tenders."""

import logging
from typing import Optional

from ..auth import require
from ..auth.permissions import USER_ADMIN_ROLES
from ..database.base import TENDERS, Store
from ..models import MatchScore, Tender, User
from ..scorer import DEFAULT_WEIGHTS, ScoringWeights, score_tender
from .company import CompanyService

logger = logging.getLogger(__name__)


class ScoringService:
    def __init__(self, store: Store, company: CompanyService, weights: ScoringWeights = DEFAULT_WEIGHTS) -> None:
        self._store = store
        self._company = company
        self.weights = weights

    def score(self, tender: Tender) -> MatchScore:
        return score_tender(tender, self._company.get_settings(), self.weights)

    def recalculate_all(self, user: Optional[User] = None) -> int:
        """Rescore every tender against the current company profile. Returns the number updated."""
        if user is not None:
            require(user, USER_ADMIN_ROLES, "recalculate AI scores")
        company = self._company.get_settings()
        updated = 0
        for row in self._store.select(TENDERS):
            tender = Tender.model_validate(row)
            result = score_tender(tender, company, self.weights)
            if result.composite_score != tender.ai_score:
                self._store.update(TENDERS, tender.id, {"ai_score": result.composite_score})
                updated += 1
        logger.info(f"Recalculated AI scores: {updated} tenders updated")
        return updated
