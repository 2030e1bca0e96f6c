"""Deduplication of imported tenders.

A tender's identity is its issuer reference number when present, otherwise
its normalized title + organization. The hash is stored on the row so
re-importing the same sheet does not create duplicates.
"""

import hashlib
import logging
from typing import Dict, List, Optional, Set, Tuple

from ..models import Tender

logger = logging.getLogger(__name__)


def _normalize(text: Optional[str]) -> str:
    return " ".join((text or "").lower().split())


def tender_hash(reference_number: Optional[str], title: str, organization: str) -> str:
    """SHA256 identity hash for a tender."""
    if reference_number and reference_number.strip():
        key = f"ref:{_normalize(reference_number)}"
    else:
        key = f"title:{_normalize(title)}|org:{_normalize(organization)}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class Deduplicator:
    """Splits incoming tenders into new ones and duplicates of existing rows."""

    def __init__(self, existing: Optional[Dict[str, str]] = None):
        """Initialize deduplicator.

        Args:
            existing: Mapping of dedup_hash -> tender id already in the database
        """
        self.existing = dict(existing or {})
        self._seen_in_batch: Set[str] = set()

    def deduplicate(self, tenders: List[Tender]) -> Tuple[List[Tender], List[Tuple[Tender, Optional[str]]]]:
        """Filter out tenders that already exist.

        Args:
            tenders: Parsed tenders, each with ``dedup_hash`` set

        Returns:
            (new tenders, duplicates) where each duplicate is paired with the id
            of the stored tender it matches (None if it repeats within the batch)
        """
        new_tenders = []
        duplicates = []

        for tender in tenders:
            if tender.dedup_hash in self.existing:
                duplicates.append((tender, self.existing[tender.dedup_hash]))
                logger.debug(f"Duplicate found: {tender.reference_number or tender.title}")
            elif tender.dedup_hash in self._seen_in_batch:
                duplicates.append((tender, None))
            else:
                new_tenders.append(tender)
                self._seen_in_batch.add(tender.dedup_hash)

        logger.info(f"Deduplication: {len(new_tenders)} new, {len(duplicates)} duplicates")
        return new_tenders, duplicates

    def add(self, dedup_hash: str, tender_id: str):
        """Record a hash after the tender was inserted."""
        self.existing[dedup_hash] = tender_id
