"""
Excel report tests
"""
from datetime import date

import pytest
from openpyxl import load_workbook

from excel_export import export_excel
from ledger_api import record_expense, record_payment
from models import Split, SplitType


class TestExportExcel:
    """export_excel()"""

    def test_report_sheets(self, tmp_path, store, trio) -> None:
        a, b, c = trio.members
        record_expense(store, trio.id, "Dinner", 90.0, a.id, SplitType.EQUAL)
        record_expense(store, trio.id, "Wine", 20.0, b.id, SplitType.CUSTOM, [Split(a.id, 10.0), Split(b.id, 10.0)])
        record_payment(store, trio.id, c.id, a.id, 5.0)
        path = str(tmp_path / "report.xlsx")

        export_excel(store.snapshot(), trio.id, path)

        wb = load_workbook(path)
        assert wb.sheetnames == ["Expenses", "Payments", "Summary", "Settlements"]

        ws = wb["Expenses"]
        assert [cell.value for cell in ws[1]] == ["Date", "Description", "Paid By", "Amount", "Split", "A", "B", "C"]
        assert [cell.value for cell in ws[2]][1:] == ["Dinner", "A", 90.0, "equal", 30.0, 30.0, 30.0]
        assert ws.cell(4, 1).value == "TOTALS"
        assert ws.cell(4, 4).value == "=SUM(D2:D3)"

        ws = wb["Payments"]
        assert [cell.value for cell in ws[2]][1:] == ["C", "A", 5.0]

        ws = wb["Summary"]
        assert [cell.value for cell in ws[2]] == ["A", 90.0, 40.0, 0.0, 5.0, 45.0]

        ws = wb["Settlements"]
        rows = [[cell.value for cell in row] for row in ws.iter_rows(min_row=2)]
        assert rows == [["C", "A", 25.0], ["B", "A", 20.0]]

    def test_date_range(self, tmp_path, store, trio) -> None:
        record_expense(store, trio.id, "Dinner", 90.0, trio.members[0].id, SplitType.EQUAL)
        path = str(tmp_path / "report.xlsx")

        export_excel(store.snapshot(), trio.id, path, start=date(2000, 1, 1), end=date(2000, 12, 31))

        wb = load_workbook(path)
        assert wb["Expenses"].max_row == 1
        assert wb["Settlements"].max_row == 1

    def test_unknown_group(self, tmp_path, store) -> None:
        with pytest.raises(KeyError):
            export_excel(store.snapshot(), "missing", str(tmp_path / "x.xlsx"))
