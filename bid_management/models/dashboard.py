"""Dashboard summary figures."""

from .base import ApiModel


class DashboardStats(ApiModel):
    active_tenders: int
    total_value: int
    total_won: int
    total_lost: int
    win_rate: float
    average_ai_score: float
    pending_approvals: int
    pending_finance_requests: int
    upcoming_deadlines: int
