"""
Excel export functionality for SharedLedger
"""
from __future__ import annotations
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Ledger
from utils import safe_float
from config import kind_label
from computations import (
    compute_summary,
    filter_entries_by_date,
    filter_entries_by_kind,
    plan,
    sort_entries_for_display,
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
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def export_excel(
    ledger: Ledger,
    filepath: str,
    kind: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export ledger to Excel file with sheets:
    - Ledger (filtered by kind / date range)
    - Balances (always over all entries)
    - Settlements
    """
    wb = Workbook()
    wb.remove(wb.active)

    member_ids = ledger.member_ids
    labels = ledger.label_map()

    # Ledger sheet
    ws = wb.create_sheet("Ledger")
    headers = ["Date", "Type", "Paid/Received by", "Amount"] + [labels[m] for m in member_ids] + ["Note", "Status"]
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"

    shown = filter_entries_by_date(filter_entries_by_kind(ledger.entries, kind), start, end)
    for e in sort_entries_for_display(shown):
        row = [e.date, kind_label(e.kind), labels.get(e.payer, e.payer), e.amount]
        row += [safe_float(e.split.get(m, 0.0)) for m in member_ids]
        row += [e.note, "Paid" if e.settled else "Open"]
        ws.append(row)

    share_cols = range(5, 5 + len(member_ids))
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 4).number_format = "#,##0"
        for c in share_cols:
            ws.cell(r, c).number_format = "0%"
    _autosize_columns(ws)

    # Balances sheet
    ws = wb.create_sheet("Balances")
    summary = compute_summary(ledger.entries, member_ids)
    ws.append(["Member", "Paid/Received", "Share", "Net (+ owed / - owes)"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for m in member_ids:
        s = summary[m]
        ws.append([labels[m], s["paid"], s["share"], s["net"]])
    for r in range(2, ws.max_row + 1):
        for c in range(2, 5):
            ws.cell(r, c).number_format = "#,##0.00"
    _autosize_columns(ws)

    # Settlements sheet
    ws = wb.create_sheet("Settlements")
    ws.append(["From (Owes)", "To (Owed)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    net = {m: summary[m]["net"] for m in member_ids}
    settlements = plan(net, member_ids)
    for s in settlements:
        ws.append([labels.get(s.from_member, s.from_member), labels.get(s.to_member, s.to_member), s.amount])
    if not settlements:
        ws.append(["All settled."])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = "#,##0.00"
    _autosize_columns(ws)

    wb.save(filepath)
