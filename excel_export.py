"""
Excel export functionality for SplitLedger
"""
from __future__ import annotations
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Group, Ledger
from computations import (
    compute_member_summary,
    compute_settlements,
    filter_expenses_by_date,
    filter_payments_by_date,
    group_total_spent,
)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_format(ws, first_col, last_col, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = "0.00"


def _new_sheet(wb, title, headers):
    ws = wb.create_sheet(title)
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    return ws


def _write_expenses(wb, group: Group, expenses):
    names = {m.id: m.name for m in group.members}
    headers = ["Date", "Description", "Paid By", "Amount", "Split"] + [m.name for m in group.members]
    ws = _new_sheet(wb, "Expenses", headers)

    for e in sorted(expenses, key=lambda x: x.date):
        shares = {m.id: 0.0 for m in group.members}
        for s in e.splits:
            if s.member_id in shares:
                shares[s.member_id] += s.amount
        ws.append(
            [e.date[:10], e.description, names.get(e.paid_by, e.paid_by), e.amount, e.split_type]
            + [shares[m.id] for m in group.members]
        )

    if ws.max_row >= 2:
        last = ws.max_row
        ws.append(["TOTALS"] + [""] * (len(headers) - 1))
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        # Using Excel formulas for better transparency
        for col in [4] + list(range(6, 6 + len(group.members))):
            letter = get_column_letter(col)
            ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{last})"

    _money_format(ws, 4, 4)
    _money_format(ws, 6, 5 + len(group.members))
    _autosize_columns(ws)


def _write_payments(wb, group: Group, payments):
    names = {m.id: m.name for m in group.members}
    ws = _new_sheet(wb, "Payments", ["Date", "From", "To", "Amount"])
    for p in sorted(payments, key=lambda x: x.date):
        ws.append([p.date[:10], names.get(p.from_id, p.from_id), names.get(p.to_id, p.to_id), p.amount])
    _money_format(ws, 4, 4)
    _autosize_columns(ws)


def export_excel(
    ledger: Ledger,
    group_id: str,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export one group's report to an Excel file with sheets:
    - Expenses (one column per member share, formula totals)
    - Payments
    - Summary (paid, consumed, sent, received, net per member)
    - Settlements (proposed transfers from the net balances)
    """
    group = ledger.find_group(group_id)
    if group is None:
        raise KeyError(f"Unknown group: {group_id}")

    exps = filter_expenses_by_date([e for e in ledger.expenses if e.group_id == group_id], start, end)
    pays = filter_payments_by_date([p for p in ledger.payments if p.group_id == group_id], start, end)

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    _write_expenses(wb, group, exps)
    _write_payments(wb, group, pays)

    # Summary sheet
    ws = _new_sheet(wb, "Summary", ["Member", "Paid", "Consumed", "Sent", "Received", "Net"])
    summary = compute_member_summary(group, exps, pays)
    for m in group.members:
        s = summary[m.id]
        ws.append([m.name, s["paid"], s["consumed"], s["sent"], s["received"], s["net"]])
    ws.append(["Total spent", group_total_spent(exps)])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    _money_format(ws, 2, 6)
    _autosize_columns(ws)

    # Settlements sheet
    ws = _new_sheet(wb, "Settlements", ["From (Debtor)", "To (Creditor)", "Amount"])
    net = {member_id: s["net"] for member_id, s in summary.items()}
    for t in compute_settlements(net, group):
        ws.append([t.from_name, t.to_name, t.amount])
    _money_format(ws, 3, 3)
    _autosize_columns(ws)

    wb.save(filepath)
