import io

import pytest
from openpyxl import Workbook


def build_workbook(sheets, hidden=()):
    """sheets: list of (title, rows) pairs; rows are appended as-is."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
        if title in hidden:
            ws.sheet_state = "hidden"
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def workbook_bytes():
    return build_workbook
