"""
One upload's worth of work.

Responsibilities:
- reject missing input before touching the file
- decode the first sheet
- drop rows whose identifier is listed
- write the kept rows to a new workbook
- build the response envelope
"""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Dict, List, Optional, Tuple

from .identifiers import parse_identifier_text
from .row_filter import FilterResult, filter_rows
from .rules import (
    IDENTIFIER_COLUMN,
    MISSING_INPUT_MESSAGE,
    OUTPUT_FILENAME,
    OUTPUT_SHEET_NAME,
    XLSX_MEDIA_TYPE,
)
from .workbook import read_rows, write_rows

logger = logging.getLogger(__name__)


class InputValidationError(Exception):
    """Raised when the file or the identifier list is missing."""

    def __init__(self, message: str = MISSING_INPUT_MESSAGE):
        super().__init__(message)
        self.message = message


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def validate_inputs(
    raw: Optional[bytes], filename: Optional[str], identifiers_text: Optional[str]
) -> List[str]:
    """
    Check that a file and at least one identifier were supplied.

    Returns the parsed identifier list.
    """
    if raw is None or not filename or not (identifiers_text or "").strip():
        logger.warning("rejected request: file or identifiers missing")
        raise InputValidationError()
    return parse_identifier_text(identifiers_text)


def filter_spreadsheet(
    raw: Optional[bytes], filename: Optional[str], identifiers_text: Optional[str]
) -> Tuple[bytes, FilterResult]:
    """Validate, decode, filter and re-encode. Returns the xlsx bytes and counts."""
    identifiers = validate_inputs(raw, filename, identifiers_text)

    rows = read_rows(raw, filename)
    result = filter_rows(rows, IDENTIFIER_COLUMN, identifiers)
    content = write_rows(result.kept, OUTPUT_SHEET_NAME)

    logger.info(
        "processed %s: total=%d removed=%d remaining=%d",
        filename,
        result.total_count,
        result.removed_count,
        result.remaining_count,
    )
    return content, result


def summary_of(result: FilterResult) -> Dict[str, int]:
    return {
        "total_rows": result.total_count,
        "removed_rows": result.removed_count,
        "remaining_rows": result.remaining_count,
    }


def process_spreadsheet(
    raw: Optional[bytes], filename: Optional[str], identifiers_text: Optional[str]
) -> Dict[str, Any]:
    """
    Returns a dict matching the API's response envelope.
    """
    content, result = filter_spreadsheet(raw, filename, identifiers_text)

    return {
        "processed_file": {
            "filename": OUTPUT_FILENAME,
            "media_type": XLSX_MEDIA_TYPE,
            "sha256": _sha256_hex(content),
            "content_b64": base64.b64encode(content).decode("ascii"),
        },
        "summary": summary_of(result),
    }
