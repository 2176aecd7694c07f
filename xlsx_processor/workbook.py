"""
Spreadsheet decoding and encoding.

Decoding reads the first sheet only. The first non-empty row is the header;
every later row becomes a dict keyed by header text, with empty cells left
out. Encoding writes rows back as a single-sheet xlsx workbook.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import xlrd
from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .identifiers import decode_text_bytes
from .row_filter import identifier_text
from .rules import (
    CSV_DELIMITERS,
    CSV_EXTENSIONS,
    EMPTY_HEADER,
    OUTPUT_SHEET_NAME,
    READ_ERROR_MESSAGE,
    XLS_EXTENSIONS,
    XLSX_EXTENSIONS,
)

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class SpreadsheetReadError(Exception):
    """Raised when an upload cannot be read as a spreadsheet."""

    def __init__(self, message: str = READ_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _unique_headers(cells: Sequence[Any], width: int) -> List[str]:
    """
    Header names for `width` columns.

    Blank header cells become __EMPTY; repeated names get _1, _2, ... suffixes.
    """
    headers: List[str] = []
    seen: Dict[str, int] = {}

    for i in range(width):
        cell = cells[i] if i < len(cells) else None
        base = EMPTY_HEADER if _is_empty(cell) else identifier_text(cell)

        name = base
        count = seen.get(base, 0)
        while name in seen:
            count += 1
            name = f"{base}_{count}"
        seen[base] = count
        seen.setdefault(name, 0)
        headers.append(name)

    return headers


def rows_from_grid(grid: Iterable[Sequence[Any]]) -> List[Row]:
    """Turn a grid of cell values (first non-empty row = header) into row dicts."""
    lines = [list(r) for r in grid if not all(_is_empty(v) for v in r)]
    if not lines:
        return []

    width = max(len(r) for r in lines)
    headers = _unique_headers(lines[0], width)

    rows: List[Row] = []
    for line in lines[1:]:
        rows.append({
            headers[i]: value
            for i, value in enumerate(line)
            if not _is_empty(value)
        })
    return rows


def _xlsx_grid(raw: bytes) -> List[tuple]:
    wb = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            raise SpreadsheetReadError()
        ws = wb.worksheets[0]
        return list(ws.iter_rows(values_only=True))
    finally:
        wb.close()


def _xls_cell_value(cell: xlrd.sheet.Cell, datemode: int) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value


def _xls_grid(raw: bytes) -> List[list]:
    book = xlrd.open_workbook(file_contents=raw)
    if book.nsheets == 0:
        raise SpreadsheetReadError()
    sheet = book.sheet_by_index(0)
    return [
        [_xls_cell_value(cell, book.datemode) for cell in sheet.row(r)]
        for r in range(sheet.nrows)
    ]


def _csv_grid(raw: bytes) -> List[list]:
    text = decode_text_bytes(raw)
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    try:
        dialect = csv.Sniffer().sniff(text[:4096], delimiters=CSV_DELIMITERS)
        delimiter = dialect.delimiter
    except csv.Error:
        delimiter = ","
    logger.debug("csv delimiter: %r", delimiter)

    return list(csv.reader(io.StringIO(text, newline=""), delimiter=delimiter))


def read_rows(raw: bytes, filename: str) -> List[Row]:
    """
    Decode the first sheet of an uploaded spreadsheet into rows.

    The decoder is chosen by file extension. Any decoding failure is reported
    as SpreadsheetReadError; corrupt files and unsupported formats look the same
    to the caller.
    """
    name = (filename or "").lower()

    if name.endswith(XLSX_EXTENSIONS):
        decode = _xlsx_grid
    elif name.endswith(XLS_EXTENSIONS):
        decode = _xls_grid
    elif name.endswith(CSV_EXTENSIONS):
        decode = _csv_grid
    else:
        logger.warning("unsupported spreadsheet extension: %s", filename)
        raise SpreadsheetReadError()

    if not raw:
        logger.warning("empty upload: %s", filename)
        raise SpreadsheetReadError()

    try:
        grid = decode(raw)
    except SpreadsheetReadError:
        raise
    except Exception as e:
        logger.warning("failed to decode %s: %s", filename, e)
        raise SpreadsheetReadError() from e

    return rows_from_grid(grid)


def column_order(rows: Iterable[Row]) -> List[str]:
    """Union of row keys in first-seen order."""
    columns: Dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def _cell_for_xlsx(value: Any) -> Any:
    # xlsx cannot hold ASCII control characters
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def write_rows(rows: Sequence[Row], sheet_name: Optional[str] = None) -> bytes:
    """Encode rows as an xlsx workbook holding exactly one sheet."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name or OUTPUT_SHEET_NAME

    columns = column_order(rows)
    if columns:
        ws.append([_cell_for_xlsx(c) for c in columns])
        for row in rows:
            ws.append([_cell_for_xlsx(row.get(c)) for c in columns])

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
