"""Tender import from spreadsheets, with dedup and corrigendum handling."""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..auth import require
from ..auth.permissions import IMPORT_ROLES
from ..database.base import EXCEL_UPLOADS, TENDERS, Store
from ..models import ExcelUpload, Tender, TenderStatus, UploadStatus, User
from ..query.predicates import Order, in_
from ..services import activity as act
from ..services.activity import ActivityLogger
from ..services.scoring import ScoringService
from .dedup import Deduplicator
from .parser import parse_sheet
from .workbook import read_workbook

logger = logging.getLogger(__name__)

# Corrigendum fields compared between a stored tender and its re-imported row
CORRIGENDUM_FIELDS = ("deadline", "value", "link", "location")

# Hashes per IN lookup, keeps the request URL short
HASH_LOOKUP_BATCH = 100


class ExcelImporter:
    """Imports active tenders from .xlsx/.xls workbooks."""

    def __init__(self, store: Store, activity: ActivityLogger, scoring: ScoringService) -> None:
        self._store = store
        self._activity = activity
        self._scoring = scoring

    def _existing_hashes(self, hashes: Iterable[str]) -> Dict[str, str]:
        """Map the given dedup hashes to the ids of tenders already stored with them."""
        wanted = sorted(set(hashes))
        found: Dict[str, str] = {}
        for start in range(0, len(wanted), HASH_LOOKUP_BATCH):
            batch = wanted[start:start + HASH_LOOKUP_BATCH]
            for row in self._store.select(TENDERS, [in_("dedup_hash", batch)]):
                found[row["dedup_hash"]] = row["id"]
        return found

    def import_file(self, path, file_name: str, user: User, now: Optional[datetime] = None) -> ExcelUpload:
        """Process a stored workbook and record the upload.

        Any failure marks the upload as failed before propagating.

        Returns:
            The completed ExcelUpload record with per-outcome counts

        Raises:
            InvalidRequestError: If the workbook cannot be read
        """
        require(user, IMPORT_ROLES, "import tenders")
        now = now or datetime.now(timezone.utc)
        started = time.monotonic()
        upload = ExcelUpload(file_name=file_name, file_path=str(path), uploaded_by=user.id)
        self._store.insert(EXCEL_UPLOADS, upload.to_record())

        try:
            rejected = self._process(upload, Path(path), file_name, user, now)
        except Exception as e:
            logger.error(f"Import of {file_name} failed: {e}")
            self._finish(upload, started, UploadStatus.FAILED, error_log=str(e))
            raise

        logger.info(
            f"Imported {file_name}: {upload.entries_added} added, {upload.entries_updated} updated, "
            f"{upload.entries_duplicate} duplicates, {upload.entries_rejected} rejected"
        )
        return self._finish(upload, started, UploadStatus.COMPLETED, error_log="\n".join(rejected) or None)

    def _process(self, upload: ExcelUpload, path: Path, file_name: str, user: User, now: datetime) -> List[str]:
        """Parse, dedup and store every sheet. Updates ``upload`` counts and returns rejection reasons."""
        parsed_sheets = [parse_sheet(sheet, file_name, now) for sheet in read_workbook(path)]
        parsed_sheets = [parsed for parsed in parsed_sheets if parsed.total_rows]

        dedup = Deduplicator(self._existing_hashes(
            tender.dedup_hash for parsed in parsed_sheets for tender in parsed.tenders
        ))
        rejected: List[str] = []
        added: List[Tender] = []

        for parsed in parsed_sheets:
            upload.sheets_processed += 1
            upload.total_entries += parsed.total_rows
            rejected.extend(parsed.rejected)

            new_tenders, duplicates = dedup.deduplicate(parsed.tenders)
            for tender in new_tenders:
                tender.ai_score = self._scoring.score(tender).composite_score
                self._store.insert(TENDERS, tender.to_record())
                dedup.add(tender.dedup_hash, tender.id)
                added.append(tender)
                upload.entries_added += 1

            for incoming, existing_id in duplicates:
                if existing_id and self._apply_corrigendum(existing_id, incoming, user, file_name, now):
                    upload.entries_updated += 1
                else:
                    upload.entries_duplicate += 1

        upload.entries_rejected = len(rejected)
        for tender in added:
            self._activity.log(tender.id, act.EXCEL_UPLOAD, user.id, {
                "fileName": file_name,
                "tendersAdded": len(added),
                "duplicates": upload.entries_duplicate,
            })
        return rejected

    def _apply_corrigendum(self, tender_id: str, incoming: Tender, user: User, file_name: str,
                           now: datetime) -> bool:
        """Update a stored tender when the re-imported row extends its deadline.

        A missed opportunity whose deadline moves into the future is reactivated.
        Returns True if anything was changed.
        """
        row = self._store.get(TENDERS, tender_id)
        if row is None:
            return False
        current = Tender.model_validate(row)
        if incoming.deadline <= current.deadline:
            return False

        changes = {}
        for name in CORRIGENDUM_FIELDS:
            new_value = getattr(incoming, name)
            if new_value is not None and new_value != getattr(current, name):
                changes[name] = new_value
        update = Tender.model_validate({**current.model_dump(), **changes}).to_record()
        update = {name: update[name] for name in changes}
        if current.status == TenderStatus.MISSED_OPPORTUNITY and incoming.deadline >= now:
            update["status"] = TenderStatus.PUBLISHED.value
        update["updated_at"] = now.isoformat()
        self._store.update(TENDERS, tender_id, update)

        logger.info(f"Corrigendum applied to tender {tender_id}: {sorted(changes)}")
        self._activity.log(tender_id, act.CORRIGENDUM_UPDATE, user.id, {
            "updatedFields": sorted(changes),
            "fileName": file_name,
            "oldDeadline": current.deadline.isoformat(),
            "newDeadline": incoming.deadline.isoformat(),
            "reactivated": "status" in update,
        })
        return True

    def _finish(self, upload: ExcelUpload, started: float, status: UploadStatus,
                error_log: Optional[str] = None) -> ExcelUpload:
        upload.status = status
        upload.error_log = error_log
        upload.processing_time = int((time.monotonic() - started) * 1000)
        self._store.update(EXCEL_UPLOADS, upload.id, {
            k: v for k, v in upload.to_record().items() if k != "id"
        })
        return upload

    def list_uploads(self) -> List[ExcelUpload]:
        rows = self._store.select(EXCEL_UPLOADS, order=Order("uploaded_at", descending=True))
        return [ExcelUpload.model_validate(row) for row in rows]
