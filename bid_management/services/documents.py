"""Tender and company document storage.

Files are streamed to ``upload_dir`` in fixed-size chunks; metadata rows live
in the ``documents`` table.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

from ..database.base import DOCUMENTS, TENDERS, Store
from ..errors import InvalidRequestError, NotFoundError
from ..models import Document, DocumentCategory, User
from ..query.predicates import Order, eq, is_null
from . import activity as act
from .activity import ActivityLogger

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ALLOWED_TYPES = {
    ".pdf": ("application/pdf",),
    ".doc": ("application/msword",),
    ".docx": ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",),
    ".xls": ("application/vnd.ms-excel",),
    ".xlsx": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",),
}


def check_file_type(filename: str, mime_type: Optional[str]) -> str:
    """Validate extension and MIME type together. Returns the lowercased extension."""
    extension = Path(filename or "").suffix.lower()
    allowed = ALLOWED_TYPES.get(extension)
    if allowed is None:
        raise InvalidRequestError("Invalid file type. Only PDF, DOC, DOCX, XLS, XLSX files are allowed.")
    if (mime_type or "").lower() not in allowed:
        raise InvalidRequestError(f"Invalid content type {mime_type!r} for {extension} file")
    return extension


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class DocumentService:
    def __init__(self, store: Store, activity: ActivityLogger, upload_dir: str, max_bytes: int) -> None:
        self._store = store
        self._activity = activity
        self._upload_dir = Path(upload_dir)
        self._max_bytes = max_bytes

    def _write_stream(self, source: BinaryIO, target: Path) -> int:
        """Copy ``source`` to ``target`` chunk by chunk, enforcing the size limit."""
        target.parent.mkdir(parents=True, exist_ok=True)
        written = 0
        try:
            with open(target, "wb") as out:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self._max_bytes:
                        raise InvalidRequestError(
                            f"File too large. Maximum size is {format_size(self._max_bytes)}"
                        )
                    out.write(chunk)
        except InvalidRequestError:
            target.unlink(missing_ok=True)
            raise
        return written

    def store_file(self, source: BinaryIO, original_name: str, subdir: str = "") -> Tuple[Path, int]:
        """Stream an upload to disk under a generated name. Returns (path, size)."""
        extension = Path(original_name).suffix.lower()
        target = self._upload_dir / subdir / f"{uuid.uuid4().hex}{extension}"
        size = self._write_stream(source, target)
        return target, size

    def upload(
        self,
        source: BinaryIO,
        original_name: str,
        mime_type: Optional[str],
        user: User,
        tender_id: Optional[str] = None,
        category: DocumentCategory = DocumentCategory.RFP_DOCUMENT,
    ) -> Document:
        check_file_type(original_name, mime_type)
        if tender_id is not None and self._store.get(TENDERS, tender_id) is None:
            raise NotFoundError("Tender not found")
        if tender_id is None:
            category = DocumentCategory.COMPANY_DOCUMENT

        path, size = self.store_file(source, original_name, "documents")
        document = Document(
            tender_id=tender_id,
            filename=path.name,
            original_name=os.path.basename(original_name),
            mime_type=mime_type,
            size=size,
            category=category,
            uploaded_by=user.id,
        )
        self._store.insert(DOCUMENTS, document.to_record())
        logger.info(f"Stored document {document.id} ({document.original_name}, {size} bytes)")
        if tender_id:
            self._activity.log(tender_id, act.DOCUMENT_UPLOADED, user.id, {
                "fileName": document.original_name,
                "fileSize": format_size(size),
            })
        return document

    def list_documents(self, tender_id: Optional[str] = None) -> List[Document]:
        """Documents for one tender, or company documents when ``tender_id`` is None."""
        predicate = eq("tender_id", tender_id) if tender_id else is_null("tender_id")
        rows = self._store.select(DOCUMENTS, [predicate], order=Order("uploaded_at", descending=True))
        return [Document.model_validate(row) for row in rows]

    def get_document(self, document_id: str) -> Document:
        row = self._store.get(DOCUMENTS, document_id)
        if row is None:
            raise NotFoundError("Document not found")
        return Document.model_validate(row)

    def file_path(self, document: Document) -> Path:
        path = self._upload_dir / "documents" / document.filename
        if not path.is_file():
            raise NotFoundError("Document file not found")
        return path

    def delete_document(self, document_id: str, user: User) -> None:
        document = self.get_document(document_id)
        path = self._upload_dir / "documents" / document.filename
        path.unlink(missing_ok=True)
        self._store.delete(DOCUMENTS, document_id)
        logger.info(f"Deleted document {document_id} by {user.username}")
