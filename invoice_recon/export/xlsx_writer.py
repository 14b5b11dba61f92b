"""Spreadsheet rendering of the reconciled table with openpyxl."""

import io
from collections.abc import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from invoice_recon.reconciliation.layout import ANOMALY_COLUMN, HEADERS, ColumnGroup, column_group
from invoice_recon.reconciliation.models import ReconciledRow

SHEET_TITLE = "Extracted Data"
COLUMN_WIDTHS = (14, 16, 20, 20, 12, 14, 18, 20, 16, 14, 20, 26)

HEADER_FILLS = {
    ColumnGroup.INVOICE: "D9EAD3",
    ColumnGroup.DELIVERY: "DCE6F1",
    ColumnGroup.ANOMALY: "FDE9D9",
}
CELL_FILLS = {
    ColumnGroup.INVOICE: "F6FBF4",
    ColumnGroup.DELIVERY: "F4F8FD",
    ColumnGroup.ANOMALY: "FFF6DD",
}
ANOMALY_FONT_COLOR = "9C6500"

_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def build_workbook(rows: Iterable[ReconciledRow]) -> Workbook:
    """Build a single-sheet workbook: grouped, coloured header and data rows.

    Invoice and delivery cells are always tinted with their group colour; the
    anomaly cell only when it holds text.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(list(HEADERS))
    ws.freeze_panes = "A2"
    for col_idx, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    for col_idx in range(1, len(HEADERS) + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = Font(bold=True)
        cell.fill = _solid(HEADER_FILLS[column_group(col_idx - 1)])
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = _BORDER

    for row in rows:
        ws.append(list(row))
        row_idx = ws.max_row
        for col_idx in range(1, len(HEADERS) + 1):
            cell = ws.cell(row=row_idx, column=col_idx)
            cell.border = _BORDER
            group = column_group(col_idx - 1)
            if group is not ColumnGroup.ANOMALY:
                cell.fill = _solid(CELL_FILLS[group])
            elif str(row[ANOMALY_COLUMN]).strip():
                cell.fill = _solid(CELL_FILLS[group])
                cell.font = Font(color=ANOMALY_FONT_COLOR, bold=True)
    return wb


def to_xlsx_bytes(rows: Iterable[ReconciledRow]) -> bytes:
    buffer = io.BytesIO()
    build_workbook(rows).save(buffer)
    return buffer.getvalue()
