"""Spreadsheet readers.

Both formats are reduced to the same shape: per sheet, a list of rows of
cell values plus a map of (row, column) -> hyperlink target.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import openpyxl
import xlrd

from ..errors import InvalidRequestError

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")


@dataclass
class Sheet:
    name: str
    rows: List[List[Any]]
    links: Dict[Tuple[int, int], str] = field(default_factory=dict)


def _read_xlsx(path: Path) -> List[Sheet]:
    # read_only mode drops hyperlinks
    workbook = openpyxl.load_workbook(path, data_only=True)
    try:
        sheets = []
        for worksheet in workbook.worksheets:
            rows = []
            links = {}
            for r, row in enumerate(worksheet.iter_rows()):
                values = []
                for c, cell in enumerate(row):
                    values.append(cell.value)
                    if cell.hyperlink is not None and cell.hyperlink.target:
                        links[(r, c)] = cell.hyperlink.target
                rows.append(values)
            sheets.append(Sheet(name=worksheet.title, rows=rows, links=links))
        return sheets
    finally:
        workbook.close()


def _read_xls(path: Path) -> List[Sheet]:
    book = xlrd.open_workbook(str(path))
    sheets = []
    for worksheet in book.sheets():
        rows = []
        for r in range(worksheet.nrows):
            values = []
            for c in range(worksheet.ncols):
                cell = worksheet.cell(r, c)
                if cell.ctype == xlrd.XL_CELL_DATE:
                    values.append(xlrd.xldate_as_datetime(cell.value, book.datemode))
                elif cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                    values.append(None)
                else:
                    values.append(cell.value)
            rows.append(values)
        links = {key: link.url_or_path for key, link in worksheet.hyperlink_map.items() if link.url_or_path}
        sheets.append(Sheet(name=worksheet.name, rows=rows, links=links))
    return sheets


def read_workbook(path) -> List[Sheet]:
    """Read every sheet of an .xlsx or .xls file.

    Raises:
        InvalidRequestError: If the extension is unsupported or the file is unreadable
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == ".xlsx":
            sheets = _read_xlsx(path)
        elif suffix == ".xls":
            sheets = _read_xls(path)
        else:
            raise InvalidRequestError("Only Excel files (.xlsx, .xls) are allowed")
    except InvalidRequestError:
        raise
    except Exception as e:
        logger.error(f"Failed to read workbook {path.name}: {e}")
        raise InvalidRequestError(f"Could not read spreadsheet: {e}") from e

    logger.info(f"Read {len(sheets)} sheets from {path.name}")
    return sheets
