import io

import pytest
from openpyxl import Workbook, load_workbook


def build_xlsx(rows, sheet_title="Sheet1"):
    """Build an xlsx workbook in memory from a list of row tuples (first = header)."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    for row in rows:
        ws.append(list(row))
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def sheet_values(content):
    wb = load_workbook(io.BytesIO(content))
    return wb.sheetnames, [tuple(r) for r in wb.worksheets[0].iter_rows(values_only=True)]


@pytest.fixture
def students_xlsx():
    return build_xlsx([
        ("Matrícula", "Name"),
        ("A1", "X"),
        ("B2", "Y"),
        ("A1", "Z"),
    ])
