import io

from openpyxl import load_workbook

from invoice_recon.export.xlsx_writer import (
    ANOMALY_FONT_COLOR,
    CELL_FILLS,
    COLUMN_WIDTHS,
    HEADER_FILLS,
    SHEET_TITLE,
    build_workbook,
    to_xlsx_bytes,
)
from invoice_recon.reconciliation.layout import HEADERS, ColumnGroup

WITH_ANOMALY = ("2025-01-15", "INV-001", "ABC", "1", "2", "3", "", "", "", "", "", "Qty mismatch")
WITHOUT_ANOMALY = ("", "", "", "", "", "", "2025-02-01", "DN-099", "", "", "", "")


def _rgb(cell) -> str:  # type: ignore[no-untyped-def]
    return str(cell.fill.start_color.rgb)[-6:]


class TestBuildWorkbook:
    def test_sheet_and_header(self) -> None:
        ws = build_workbook([]).active
        assert ws.title == SHEET_TITLE
        assert [c.value for c in ws[1]] == list(HEADERS)
        assert ws.freeze_panes == "A2"

    def test_header_group_colours(self) -> None:
        ws = build_workbook([]).active
        assert _rgb(ws.cell(row=1, column=1)) == HEADER_FILLS[ColumnGroup.INVOICE]
        assert _rgb(ws.cell(row=1, column=7)) == HEADER_FILLS[ColumnGroup.DELIVERY]
        assert _rgb(ws.cell(row=1, column=12)) == HEADER_FILLS[ColumnGroup.ANOMALY]
        assert ws.cell(row=1, column=1).font.bold

    def test_column_widths(self) -> None:
        ws = build_workbook([]).active
        assert ws.column_dimensions["A"].width == COLUMN_WIDTHS[0]
        assert ws.column_dimensions["L"].width == COLUMN_WIDTHS[11]

    def test_data_cells_tinted_by_group(self) -> None:
        ws = build_workbook([WITH_ANOMALY]).active
        assert _rgb(ws.cell(row=2, column=3)) == CELL_FILLS[ColumnGroup.INVOICE]
        assert _rgb(ws.cell(row=2, column=9)) == CELL_FILLS[ColumnGroup.DELIVERY]

    def test_anomaly_cell_highlighted_only_when_filled(self) -> None:
        ws = build_workbook([WITH_ANOMALY, WITHOUT_ANOMALY]).active
        filled = ws.cell(row=2, column=12)
        empty = ws.cell(row=3, column=12)
        assert _rgb(filled) == CELL_FILLS[ColumnGroup.ANOMALY]
        assert filled.font.bold
        assert str(filled.font.color.rgb).endswith(ANOMALY_FONT_COLOR)
        assert empty.fill.fill_type is None

    def test_bytes_load_back(self) -> None:
        wb = load_workbook(io.BytesIO(to_xlsx_bytes([WITH_ANOMALY])))
        ws = wb[SHEET_TITLE]
        assert ws.max_row == 2
        assert ws.cell(row=2, column=2).value == "INV-001"
        assert ws.cell(row=2, column=12).value == "Qty mismatch"
