"""Business operations over the store."""

from .activity import ActivityLogger
from .company import CompanyService
from .dashboard import compute_stats
from .documents import DocumentService
from .finance import FinanceService
from .meetings import MeetingService
from .missed import sweep_missed_opportunities
from .not_relevant import NotRelevantService
from .scoring import ScoringService
from .tenders import TenderService
from .users import UserService

__all__ = [
    "ActivityLogger",
    "CompanyService",
    "compute_stats",
    "DocumentService",
    "FinanceService",
    "MeetingService",
    "sweep_missed_opportunities",
    "NotRelevantService",
    "ScoringService",
    "TenderService",
    "UserService",
]
