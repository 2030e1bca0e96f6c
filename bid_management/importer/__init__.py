"""Spreadsheet import of tenders."""

from .dedup import Deduplicator, tender_hash
from .importer import ExcelImporter
from .parser import parse_deadline, parse_sheet, parse_value
from .workbook import SPREADSHEET_EXTENSIONS, Sheet, read_workbook

__all__ = [
    "Deduplicator",
    "tender_hash",
    "ExcelImporter",
    "parse_deadline",
    "parse_sheet",
    "parse_value",
    "SPREADSHEET_EXTENSIONS",
    "Sheet",
    "read_workbook",
]
