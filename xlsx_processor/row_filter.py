"""
Row filtering by identifier.

Rows come from the first sheet of an uploaded spreadsheet, keyed by header
text. A row is dropped when the text of its identifier cell is one of the
excluded identifiers. Matching is exact: case-sensitive, no trimming.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

Row = Dict[str, Any]


@dataclass(frozen=True)
class FilterResult:
    kept: List[Row]
    total_count: int
    removed_count: int

    @property
    def remaining_count(self) -> int:
        return self.total_count - self.removed_count


# JavaScript switches Number#toString to exponent form at this magnitude
EXPONENT_THRESHOLD = 1e21


def _exponent_text(value: float) -> str:
    mantissa, exponent = repr(value).split("e")
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    sign = "-" if exponent.startswith("-") else "+"
    return f"{mantissa}e{sign}{exponent.lstrip('+-')}"


def identifier_text(value: Any) -> Optional[str]:
    """
    Text form of an identifier cell, or None when the cell holds nothing.

    Spreadsheets store numbers as floats, so an integral float renders
    without its fractional part: 12345.0 -> "12345". From 1e21 up, numbers
    render in exponent form, 1e21 -> "1e+21".
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value):
        if abs(value) >= EXPONENT_THRESHOLD:
            return _exponent_text(value)
        if value.is_integer():
            return str(int(value))
    return str(value)


def filter_rows(
    rows: Sequence[Mapping[str, Any]],
    identifier_column: str,
    exclude: Iterable[str],
) -> FilterResult:
    """
    Keep the rows whose identifier is not excluded, preserving order.

    A row without the identifier column is always kept.
    """
    excluded = frozenset(exclude)

    kept = []
    for row in rows:
        ident = identifier_text(row.get(identifier_column))
        if ident is not None and ident in excluded:
            continue
        kept.append(row)

    total = len(rows)
    return FilterResult(kept=kept, total_count=total, removed_count=total - len(kept))
