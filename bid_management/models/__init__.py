"""Pydantic models shared by the store, services and API layer."""

from .base import ApiModel, new_id, utc_now
from .tender import (
    ACTIVE_STATUSES,
    ApprovalStatus,
    NotRelevantDecision,
    NotRelevantRequest,
    Tender,
    TenderCreate,
    TenderDetail,
    TenderSource,
    TenderStatus,
    TenderUpdate,
    clamp_score,
)
from .user import LoginRequest, LoginResponse, User, UserCreate, UserPublic, UserRole, UserSession, UserUpdate
from .assignment import AssignmentPriority, AssignmentStatus, AssignRequest, TenderAssignment
from .finance import (
    FinanceDecision,
    FinanceOverview,
    FinanceRequest,
    FinanceRequestCreate,
    FinanceRequestStatus,
    FinanceRequestType,
)
from .meeting import Meeting, MeetingCreate, MeetingStatus, MeetingUpdate
from .document import Document, DocumentCategory
from .activity import ActivityLog, CommentCreate
from .company import COMPANY_SETTINGS_ID, CompanySettings, CompanySettingsUpdate
from .excel_upload import ExcelUpload, UploadStatus
from .pagination import Pagination, TenderPage
from .dashboard import DashboardStats
from .scoring import DimensionScore, MatchScore
from .ai import AnalyzeTenderRequest, GenerateBidRequest, OptimizeBidRequest, PricingRequest, RiskRequest

__all__ = [
    "ApiModel",
    "new_id",
    "utc_now",
    "ACTIVE_STATUSES",
    "ApprovalStatus",
    "NotRelevantDecision",
    "NotRelevantRequest",
    "Tender",
    "TenderCreate",
    "TenderDetail",
    "TenderSource",
    "TenderStatus",
    "TenderUpdate",
    "clamp_score",
    "LoginRequest",
    "LoginResponse",
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "UserSession",
    "UserUpdate",
    "AssignmentPriority",
    "AssignmentStatus",
    "AssignRequest",
    "TenderAssignment",
    "FinanceDecision",
    "FinanceOverview",
    "FinanceRequest",
    "FinanceRequestCreate",
    "FinanceRequestStatus",
    "FinanceRequestType",
    "Meeting",
    "MeetingCreate",
    "MeetingStatus",
    "MeetingUpdate",
    "Document",
    "DocumentCategory",
    "ActivityLog",
    "CommentCreate",
    "COMPANY_SETTINGS_ID",
    "CompanySettings",
    "CompanySettingsUpdate",
    "ExcelUpload",
    "UploadStatus",
    "Pagination",
    "TenderPage",
    "DashboardStats",
    "DimensionScore",
    "MatchScore",
    "AnalyzeTenderRequest",
    "GenerateBidRequest",
    "OptimizeBidRequest",
    "PricingRequest",
    "RiskRequest",
]
