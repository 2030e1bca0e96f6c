"""Store interface shared by the Supabase and in-memory backends."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..query.predicates import Order, Predicate, eq

# Table names
TENDERS = "tenders"
USERS = "users"
USER_SESSIONS = "user_sessions"
TENDER_ASSIGNMENTS = "tender_assignments"
FINANCE_REQUESTS = "finance_requests"
MEETINGS = "meetings"
DOCUMENTS = "documents"
ACTIVITY_LOGS = "activity_logs"
COMPANY_SETTINGS = "company_settings"
EXCEL_UPLOADS = "excel_uploads"

Record = Dict[str, Any]


class Store(ABC):
    """Row-level access to the application tables.

    Rows are plain dicts keyed by column name with JSON-safe values. Every
    table has a string ``id`` primary key.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        predicates: Sequence[Predicate] = (),
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Record]:
        """Return rows matching all ``predicates`` (AND-combined)."""

    @abstractmethod
    def count(self, table: str, predicates: Sequence[Predicate] = ()) -> int:
        """Return the number of rows matching ``predicates``, ignoring any paging."""

    @abstractmethod
    def insert(self, table: str, record: Record) -> Record:
        """Insert a row and return it as stored."""

    @abstractmethod
    def update(self, table: str, record_id: str, changes: Record) -> Optional[Record]:
        """Apply ``changes`` to one row. Returns the updated row or None if absent."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> bool:
        """Delete one row. Returns False if it did not exist."""

    def get(self, table: str, record_id: str) -> Optional[Record]:
        rows = self.select(table, [eq("id", record_id)], limit=1)
        return rows[0] if rows else None

    def find_one(self, table: str, column: str, value: Any) -> Optional[Record]:
        rows = self.select(table, [eq(column, value)], limit=1)
        return rows[0] if rows else None
