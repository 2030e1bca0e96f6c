"""Company match scoring for tenders."""

from .engine import parse_amount, score_tender
from .weights import DEFAULT_WEIGHTS, ScoringWeights, load_weights

__all__ = [
    "parse_amount",
    "score_tender",
    "DEFAULT_WEIGHTS",
    "ScoringWeights",
    "load_weights",
]
