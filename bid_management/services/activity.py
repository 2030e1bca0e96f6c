"""Tender activity timeline.

Logging an activity is best-effort: a failure is logged and never aborts the
operation that triggered it.
"""

import logging
from typing import Any, Dict, List, Optional

from ..database.base import ACTIVITY_LOGS, USERS, Store
from ..formatting import format_inr
from ..models import ActivityLog
from ..query.predicates import Order, eq

logger = logging.getLogger(__name__)

SYSTEM_USER = "System"

TENDER_CREATED = "tender_created"
TENDER_UPDATED = "tender_updated"
TENDER_ASSIGNED = "tender_assigned"
ASSIGNMENT_REMOVED = "assignment_removed"
TENDER_DELETED = "tender_deleted"
MARKED_NOT_RELEVANT = "marked_not_relevant"
NOT_RELEVANT_DECIDED = "not_relevant_decided"
EXCEL_UPLOAD = "excel_upload"
CORRIGENDUM_UPDATE = "corrigendum_update"
MISSED_OPPORTUNITY = "missed_opportunity"
STATUS_CHANGED = "status_changed"
DOCUMENT_UPLOADED = "document_uploaded"
COMMENT_ADDED = "comment_added"
DEADLINE_EXTENDED = "deadline_extended"

ACTION_LABELS = {
    TENDER_CREATED: "🆕 Created",
    TENDER_UPDATED: "✏️ Update",
    TENDER_ASSIGNED: "👤 Assignment",
    ASSIGNMENT_REMOVED: "❌ Assignment Removed",
    TENDER_DELETED: "🗑️ Deletion",
    MARKED_NOT_RELEVANT: "⚠️ Marked Not Relevant",
    NOT_RELEVANT_DECIDED: "✅ Not Relevant Decision",
    EXCEL_UPLOAD: "📊 Excel Upload",
    CORRIGENDUM_UPDATE: "📝 Corrigendum Update",
    MISSED_OPPORTUNITY: "⏰ Missed Opportunity",
    STATUS_CHANGED: "🔄 Status Change",
    DOCUMENT_UPLOADED: "📎 Document Upload",
    COMMENT_ADDED: "💬 Comment",
    DEADLINE_EXTENDED: "⏱️ Deadline Extension",
}


class ActivityLogger:
    """Writes and reads ``activity_logs`` rows."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def _user_name(self, user_id: Optional[str]) -> str:
        if not user_id or user_id == SYSTEM_USER:
            return SYSTEM_USER
        row = self._store.get(USERS, user_id)
        return row["name"] if row else user_id

    def describe(self, activity_type: str, created_by: str, details: Dict[str, Any], fallback: str = "") -> str:
        """Human-readable description for an activity."""
        by = self._user_name(created_by)

        if activity_type == TENDER_ASSIGNED:
            assignee = self._user_name(details.get("assignedTo"))
            budget = format_inr(details.get("budget"))
            priority = details.get("priority", "medium")
            return f"Tender assigned to {assignee} with priority: {priority} and budget: {budget} by {by}"
        if activity_type == ASSIGNMENT_REMOVED:
            return f"Assignment removed and tender returned to active status by {by}"
        if activity_type == TENDER_DELETED:
            return f'Tender deleted: "{details.get("title", "Unknown title")}" by {by}'
        if activity_type == MARKED_NOT_RELEVANT:
            return f"Tender marked as not relevant. Reason: {details.get('reason') or 'No reason provided'} by {by}"
        if activity_type == NOT_RELEVANT_DECIDED:
            return f"Not relevant request {details.get('decision', 'decided')} by {by}"
        if activity_type == EXCEL_UPLOAD:
            return (
                f"Excel file uploaded: {details.get('fileName', 'Unknown file')} - "
                f"{details.get('tendersAdded', 0)} tenders added, "
                f"{details.get('duplicates', 0)} duplicates skipped by {by}"
            )
        if activity_type == CORRIGENDUM_UPDATE:
            fields = ", ".join(details.get("updatedFields") or []) or "Multiple fields"
            return f"Corrigendum update applied - {fields} updated by {by}"
        if activity_type == MISSED_OPPORTUNITY:
            return (
                f"Tender automatically marked as missed opportunity - deadline expired "
                f"({details.get('deadline', 'Unknown date')}) by {SYSTEM_USER}"
            )
        if activity_type == STATUS_CHANGED:
            return (
                f'Status changed from "{details.get("oldStatus", "Unknown")}" '
                f'to "{details.get("newStatus", "Unknown")}" by {by}'
            )
        if activity_type == DOCUMENT_UPLOADED:
            return f"Document uploaded: {details.get('fileName', 'Unknown file')} ({details.get('fileSize', 'Unknown size')}) by {by}"
        if activity_type == COMMENT_ADDED:
            return f'Comment added: "{details.get("comment", fallback)}" by {by}'
        if activity_type == DEADLINE_EXTENDED:
            return (
                f"Deadline extended from {details.get('oldDeadline', 'Unknown')} "
                f"to {details.get('newDeadline', 'Unknown')} by {by}"
            )
        return f"{fallback or activity_type.replace('_', ' ').capitalize()} by {by}"

    def log(
        self,
        tender_id: str,
        activity_type: str,
        created_by: str,
        details: Optional[Dict[str, Any]] = None,
        description: str = "",
    ) -> Optional[ActivityLog]:
        """Record an activity. Returns None if the write failed."""
        details = details or {}
        try:
            entry = ActivityLog(
                tender_id=tender_id,
                activity_type=activity_type,
                description=self.describe(activity_type, created_by, details, description),
                created_by=created_by,
                details=details,
            )
            self._store.insert(ACTIVITY_LOGS, entry.to_record())
            return entry
        except Exception as exc:
            logger.warning(f"Could not log {activity_type} for tender {tender_id}: {exc}")
            return None

    def list_for_tender(self, tender_id: str) -> List[ActivityLog]:
        """Newest-first timeline for one tender."""
        rows = self._store.select(
            ACTIVITY_LOGS,
            [eq("tender_id", tender_id)],
            order=Order("created_at", descending=True),
        )
        entries = []
        for row in rows:
            entry = ActivityLog.model_validate(row)
            entry.action_label = ACTION_LABELS.get(entry.activity_type, "📋 Action")
            entries.append(entry)
        return entries
