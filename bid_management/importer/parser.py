"""Turns spreadsheet rows into tenders.

Header rows are located by keyword, columns are matched against alias lists,
and each data row either becomes a ``Tender`` or is rejected with a reason.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

from openpyxl.utils.datetime import from_excel

from ..formatting import MINOR_UNITS_PER_RUPEE
from ..models import Tender, TenderSource, TenderStatus
from .dedup import tender_hash
from .workbook import Sheet

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 3
HEADER_KEYWORDS = ("title", "organization", "value", "deadline", "tender", "work", "brief")

# Field -> header aliases, most specific first
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "reference_number": ("reference no", "tender id", "t247 id", "ref no", "tender no", "reference"),
    "title": ("tender brief", "tender title", "title", "work description", "work name", "brief"),
    "organization": ("organization", "organisation", "ministry", "agency", "dept", "department"),
    "value": ("estimated cost", "tender value", "estimated value", "value", "amount", "cost"),
    "deadline": ("deadline", "due date", "closing date", "last date", "end date"),
    "location": ("location", "place", "city", "state", "region"),
    "category": ("similar category", "category", "classification", "sector", "type"),
    "link": ("link", "url", "website"),
    "turnover": ("minimum average annual turnover", "minimum annual turnover", "annual turnover", "turnover"),
    "emd": ("emd",),
    "description": ("description", "details"),
}

DATE_FORMATS = (
    "%d-%m-%Y %H:%M",
    "%d/%m/%Y %H:%M",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%d-%b-%Y %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)

_URL_RE = re.compile(r"https?://[^\s)]+", re.IGNORECASE)
_GEM_RE = re.compile(r"\bgem\b", re.IGNORECASE)
# "Rs. 5,000/-", "INR 5000", "₹5,000"
_CURRENCY_PREFIX_RE = re.compile(r"^\s*(?:(?:rs|inr)\.?|₹)\s*", re.IGNORECASE)
_CURRENCY_SUFFIX_RE = re.compile(r"/-\s*$")

# Excel serial numbers above this are treated as dates
_EXCEL_SERIAL_MIN = 40000


@dataclass
class ParsedSheet:
    tenders: List[Tender] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    total_rows: int = 0


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def find_header_row(rows: List[List[Any]]) -> Optional[int]:
    """Index of the first row (within the first few) that looks like a header."""
    for index, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        cells = [_cell_text(c).lower() for c in row if c is not None]
        hits = sum(1 for cell in cells if any(k in cell for k in HEADER_KEYWORDS))
        if hits >= 2:
            return index
    return None


def map_columns(headers: List[Any]) -> Dict[str, int]:
    """Map field names to column indexes. Each column is used for at most one field."""
    normalized = [_cell_text(h).lower() for h in headers]
    mapping: Dict[str, int] = {}
    claimed = set()

    # Exact matches first so "description" does not get swallowed by a looser alias
    for exact in (True, False):
        for name, aliases in COLUMN_ALIASES.items():
            if name in mapping:
                continue
            for alias in aliases:
                found = next(
                    (i for i, h in enumerate(normalized)
                     if i not in claimed and h and (h == alias if exact else alias in h)),
                    None,
                )
                if found is not None:
                    mapping[name] = found
                    claimed.add(found)
                    break
    return mapping


def parse_value(raw: Any) -> int:
    """Rupee amount from a cell -> integer minor units. Unparseable -> 0."""
    if raw is None or raw == "":
        return 0
    if isinstance(raw, (int, float)):
        amount = Decimal(str(raw))
    else:
        text = _CURRENCY_SUFFIX_RE.sub("", _CURRENCY_PREFIX_RE.sub("", str(raw)))
        cleaned = re.sub(r"[^0-9.\-]", "", text)
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return 0
    if amount < 0:
        return 0
    return int((amount * MINOR_UNITS_PER_RUPEE).to_integral_value())


def parse_deadline(raw: Any) -> Optional[datetime]:
    """Parse a deadline cell. Naive results are taken as UTC."""
    if raw is None or raw == "":
        return None
    parsed = None
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        parsed = datetime.combine(raw, time(23, 59))
    elif isinstance(raw, (int, float)):
        if raw > _EXCEL_SERIAL_MIN:
            parsed = from_excel(raw)
    else:
        text = str(raw).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            if parsed is None and text.replace(".", "", 1).isdigit() and float(text) > _EXCEL_SERIAL_MIN:
                parsed = from_excel(float(text))
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _find_link(sheet: Sheet, row_index: int, columns: Dict[str, int], title: str, row: List[Any]) -> Optional[str]:
    for name in ("title", "link", "reference_number"):
        col = columns.get(name)
        if col is not None and (row_index, col) in sheet.links:
            return sheet.links[(row_index, col)]
    if "link" in columns:
        match = _URL_RE.search(_cell_text(_get(row, columns["link"])))
        if match:
            return match.group(0)
    match = _URL_RE.search(title)
    return match.group(0) if match else None


def _get(row: List[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def parse_sheet(sheet: Sheet, file_name: str, now: Optional[datetime] = None) -> ParsedSheet:
    """Parse one sheet into tenders.

    Rows without a title or a parseable deadline are rejected. Tenders whose
    deadline has already passed are imported as missed opportunities.
    """
    now = now or datetime.now(timezone.utc)
    result = ParsedSheet()

    header_index = find_header_row(sheet.rows)
    if header_index is None:
        logger.info(f"No header row found in sheet {sheet.name}, skipping")
        return result
    columns = map_columns(sheet.rows[header_index])
    logger.debug(f"Column mapping for sheet {sheet.name}: {columns}")

    for row_index in range(header_index + 1, len(sheet.rows)):
        row = sheet.rows[row_index]
        if not any(_cell_text(c) for c in row):
            continue
        result.total_rows += 1
        row_label = f"{sheet.name} row {row_index + 1}"

        title = _cell_text(_get(row, columns.get("title")))
        if not title:
            result.rejected.append(f"{row_label}: missing title")
            continue
        deadline = parse_deadline(_get(row, columns.get("deadline")))
        if deadline is None:
            result.rejected.append(f"{row_label}: missing or invalid deadline")
            continue

        organization = _cell_text(_get(row, columns.get("organization"))) or "Unknown"
        reference = _cell_text(_get(row, columns.get("reference_number"))) or None
        source = TenderSource.GEM if _GEM_RE.search(f"{organization} {title} {reference or ''}") else TenderSource.NON_GEM

        metadata = {"sheet": sheet.name, "fileName": file_name}
        for extra in ("turnover", "emd"):
            text = _cell_text(_get(row, columns.get(extra)))
            if text:
                metadata[extra] = text

        tender = Tender(
            reference_number=reference,
            title=title,
            organization=organization,
            description=_cell_text(_get(row, columns.get("description"))) or None,
            category=_cell_text(_get(row, columns.get("category"))) or None,
            location=_cell_text(_get(row, columns.get("location"))) or None,
            link=_find_link(sheet, row_index, columns, title, row),
            value=parse_value(_get(row, columns.get("value"))),
            deadline=deadline,
            status=TenderStatus.PUBLISHED if deadline >= now else TenderStatus.MISSED_OPPORTUNITY,
            source=source,
            metadata=metadata,
        )
        tender.dedup_hash = tender_hash(tender.reference_number, tender.title, tender.organization)
        result.tenders.append(tender)

    return result
