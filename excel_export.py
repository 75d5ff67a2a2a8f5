"""
Excel export functionality for GroupLedger
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from computations import detailed_debts, member_balances, suggest_settlements
from models import Group
from reports import filter_expenses_by_date, filter_settlements_by_date, group_summary

logger = logging.getLogger(__name__)

MONEY_FORMAT = "0.00"


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


def _new_sheet(wb, title, headers):
    ws = wb.create_sheet(title)
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    return ws


def _money_columns(ws, first_col, last_col):
    for r in range(2, ws.max_row + 1):
        for c in range(first_col, last_col + 1):
            ws.cell(r, c).number_format = MONEY_FORMAT


def export_excel(
    group: Group,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export a group's settlement report to an Excel file with sheets:
    - Balances (paid / owed / balance per member, with a totals row)
    - Debts (pairwise debts after netting)
    - Settle Up (minimal set of payments)
    - Summary
    - Categories
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    members = group.members
    exps = filter_expenses_by_date(group.expenses, start, end)
    sets = filter_settlements_by_date(group.settlements, start, end)

    # Balances
    ws = _new_sheet(wb, "Balances", ["Member", "Paid", "Owed", "Balance"])
    for b in member_balances(members, exps, sets):
        ws.append([b.member_name, b.total_paid, b.total_owed, b.balance])
    last_data_row = ws.max_row
    if last_data_row >= 2:
        ws.append(["TOTALS"])
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        # Using Excel formulas for better transparency
        for col in range(2, 5):
            letter = get_column_letter(col)
            ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{last_data_row})"
    _money_columns(ws, 2, 4)
    _autosize_columns(ws)

    # Debts
    ws = _new_sheet(wb, "Debts", ["From (Debtor)", "To (Creditor)", "Amount"])
    for d in detailed_debts(members, exps, sets):
        ws.append([d.from_name, d.to_name, d.amount])
    _money_columns(ws, 3, 3)
    _autosize_columns(ws)

    # Settle Up
    ws = _new_sheet(wb, "Settle Up", ["From (Debtor)", "To (Creditor)", "Amount"])
    for s in suggest_settlements(members, exps, sets):
        ws.append([s.from_name, s.to_name, s.amount])
    _money_columns(ws, 3, 3)
    _autosize_columns(ws)

    # Summary
    summary = group_summary(group.info, members, exps, sets)
    ws = _new_sheet(wb, "Summary", ["Metric", "Value"])
    period = f"{start.isoformat() if start else '-'} to {end.isoformat() if end else '-'}"
    ws.append(["Group", summary.group_name])
    ws.append(["Period", period])
    ws.append(["Active members", summary.member_count])
    ws.append(["Total members", summary.total_members])
    ws.append(["Expenses", summary.expense_count])
    ws.append(["Total spent", summary.total_expenses])
    ws.append(["Settlements", summary.settlement_count])
    ws.append(["Total settled", summary.total_settled])
    ws.append(["Average expense", summary.average_expense])
    ws.append(["Per-person average", summary.per_person_average])
    for r in range(2, ws.max_row + 1):
        if isinstance(ws.cell(r, 2).value, float):
            ws.cell(r, 2).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    # Categories
    ws = _new_sheet(wb, "Categories", ["Category", "Total", "Percentage"])
    for c in summary.category_breakdown:
        ws.append([c.category, c.total, c.percentage])
    _money_columns(ws, 2, 3)
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported report for group %s to %s", group.info.id, filepath)
