"""
Allocation report generation (Excel).
"""

from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Color, Font, PatternFill
from openpyxl.utils import get_column_letter

from core.allocations import DateWindow, format_percent
from core.config import DETAIL_HEADERS, FULL_ALLOCATION, SUMMARY_HEADERS
from models.entities import AllocationEntry

SUMMARY_SHEET = "Allocation Summary"
DETAIL_SHEET = "Allocation Detail"

OVER_ALLOCATED_FILL = PatternFill(patternType="solid", fgColor=Color(rgb="FFF4CCCC"))
AT_CAPACITY_FILL = PatternFill(patternType="solid", fgColor=Color(rgb="FFFFF2CC"))


def allocation_status(total: float) -> str:
    """Label for an employee's total allocation."""
    if total > FULL_ALLOCATION:
        return "Over-allocated"
    if total == FULL_ALLOCATION:
        return "At capacity"
    return "Available"


def report_filename(window: DateWindow) -> str:
    """e.g. allocations_2025_01_01_to_2025_03_31.xlsx, or ..._onwards.xlsx"""
    start = window.start.strftime("%Y_%m_%d")
    if window.end is None:
        return f"allocations_{start}_onwards.xlsx"
    return f"allocations_{start}_to_{window.end.strftime('%Y_%m_%d')}.xlsx"


def _write_headers(ws, headers: list[str]) -> None:
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_summary_sheet(ws, entries: list[AllocationEntry]) -> None:
    """
    One row per employee with total allocation and a status label.

    Over-allocated rows are shaded red, at-capacity rows yellow.
    """
    _write_headers(ws, SUMMARY_HEADERS)

    for row_idx, entry in enumerate(entries, start=2):
        status = allocation_status(entry["total_allocation"])
        row_data = [entry["employee_id"], entry["name"], entry["total_allocation"], status]
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if status == "Over-allocated":
                cell.fill = OVER_ALLOCATED_FILL
            elif status == "At capacity":
                cell.fill = AT_CAPACITY_FILL

    ws.column_dimensions["A"].width = 38
    ws.column_dimensions["B"].width = 28
    ws.column_dimensions["C"].width = 20
    ws.column_dimensions["D"].width = 16


def write_detail_sheet(ws, entries: list[AllocationEntry]) -> None:
    """One row per counted role commitment, with a SUM per employee at the end."""
    _write_headers(ws, DETAIL_HEADERS)

    row_idx = 2
    for entry in entries:
        for detail in entry["allocations"]:
            row_data = [
                entry["employee_id"],
                entry["name"],
                detail["opportunity_id"],
                detail["role_name"],
                detail["allocation"],
                detail["start_date"],
                detail["end_date"] or "Open-ended",
            ]
            for col_idx, value in enumerate(row_data, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value)
            row_idx += 1

    if row_idx > 2:
        total_cell = ws.cell(row=row_idx, column=1, value="Total")
        total_cell.font = Font(bold=True)
        alloc_col = get_column_letter(DETAIL_HEADERS.index("Allocation (%)") + 1)
        sum_cell = ws.cell(
            row=row_idx,
            column=DETAIL_HEADERS.index("Allocation (%)") + 1,
            value=f"=SUM({alloc_col}2:{alloc_col}{row_idx - 1})",
        )
        sum_cell.font = Font(bold=True)

    for col_idx in range(1, len(DETAIL_HEADERS) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 20


def create_allocation_workbook(entries: list[AllocationEntry]) -> Workbook:
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = SUMMARY_SHEET
    write_summary_sheet(ws_summary, entries)

    ws_detail = wb.create_sheet(title=DETAIL_SHEET)
    write_detail_sheet(ws_detail, entries)

    return wb


def generate_report_to_bytes(entries: list[AllocationEntry], window: DateWindow) -> tuple[bytes, str]:
    """
    Build the allocation workbook in memory (for API usage).

    Returns:
        Tuple of (excel_bytes, filename)
    """
    buffer = BytesIO()
    create_allocation_workbook(entries).save(buffer)
    return buffer.getvalue(), report_filename(window)


def save_report(entries: list[AllocationEntry], window: DateWindow, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / report_filename(window)
    create_allocation_workbook(entries).save(str(output_path))

    over = [e for e in entries if e["total_allocation"] > FULL_ALLOCATION]
    print(f"Saved allocation report to: {output_path}")
    for entry in over:
        print(f"  Over-allocated: {entry['name']} ({format_percent(entry['total_allocation'])}%)")
    return output_path
