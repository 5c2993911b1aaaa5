"""
Export hall seating matrices to Excel.
"""

import io
import os
import re
import openpyxl
from openpyxl.styles import PatternFill, Font, Alignment, Border, Side
from openpyxl.utils import get_column_letter
from typing import Dict, List, Optional
from .models import Exam, Hall, SeatingPlan

# --- Styling Constants ---
BANNER_FILL = PatternFill(start_color="D3D3D3", end_color="D3D3D3", fill_type="solid")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
WARNING_FONT = Font(size=10, italic=True, color="C00000")
CENTER_ALIGN = Alignment(horizontal="center", vertical="center")
THIN_SIDE = Side(style="thin")
THIN_BORDER = Border(left=THIN_SIDE, right=THIN_SIDE, top=THIN_SIDE, bottom=THIN_SIDE)

# Characters Excel does not allow in sheet titles
INVALID_TITLE_CHARS = re.compile(r"[\\/\[\]:*?]")


class SeatingExporter:
    """Exports the seating plans of one exam to a workbook."""

    def __init__(self, exam: Exam, plans: List[SeatingPlan], halls: Optional[Dict[str, Hall]] = None):
        self.exam = exam
        self.plans = plans
        self.halls = halls or {}

    def _hall_label(self, hall_id: str) -> str:
        hall = self.halls.get(hall_id)
        if hall is None:
            return hall_id
        return f"{hall.name} ({hall.number})"

    @staticmethod
    def _sheet_title(hall_id: str) -> str:
        # Sheet names are capped at 31 characters
        return INVALID_TITLE_CHARS.sub("_", f"Hall_{hall_id}")[:31]

    def build_workbook(self) -> openpyxl.Workbook:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)

        for plan in self.plans:
            ws = wb.create_sheet(title=self._sheet_title(plan.hall_id))
            self._format_hall_seating(ws, plan)

        ws = wb.create_sheet(title="Seat List")
        self._format_seat_list(ws)
        return wb

    def export(self, output_dir: str) -> str:
        """Writes the workbook to output_dir and returns the file path."""
        os.makedirs(output_dir, exist_ok=True)
        filename = os.path.join(output_dir, f"Seating_{self.exam.exam_id}_{self.exam.session}.xlsx")
        self.build_workbook().save(filename)
        print(f"  ✓ Exported: {filename}")
        return filename

    def to_bytes(self) -> io.BytesIO:
        buffer = io.BytesIO()
        self.build_workbook().save(buffer)
        buffer.seek(0)
        return buffer

    def _format_hall_seating(self, ws, plan: SeatingPlan):
        """Lays out one hall: header, FRONT banner, seat grid, DOOR banner."""
        last_col = get_column_letter(max(plan.cols, 4))

        ws.merge_cells(f"A1:{last_col}1")
        cell = ws["A1"]
        cell.value = f"{self.exam.subject} | Date {self.exam.date} | Session {self.exam.session}"
        cell.font = Font(size=12, bold=True)
        cell.alignment = Alignment(horizontal="left")

        ws.merge_cells(f"A2:{last_col}2")
        cell = ws["A2"]
        cell.value = f"Hall {self._hall_label(plan.hall_id)} | Students {plan.range_start}-{plan.range_end} | Order {plan.order}"
        cell.font = Font(size=12, bold=True)
        cell.alignment = Alignment(horizontal="left")

        current_row = 4
        ws.merge_cells(f"A{current_row}:{last_col}{current_row}")
        cell = ws.cell(current_row, 1)
        cell.value = "FRONT"
        cell.font = Font(size=11, bold=True)
        cell.alignment = CENTER_ALIGN
        cell.fill = BANNER_FILL
        current_row += 1

        for col in range(1, plan.cols + 1):
            cell = ws.cell(current_row, col, f"COL{col}")
            cell.font = Font(bold=True)
            cell.alignment = CENTER_ALIGN
        current_row += 1

        for row in plan.seats:
            for idx, seat in enumerate(row):
                cell = ws.cell(current_row, idx + 1, seat if seat is not None else "")
                cell.alignment = CENTER_ALIGN
                cell.border = THIN_BORDER
            current_row += 1

        ws.merge_cells(f"A{current_row}:{last_col}{current_row}")
        cell = ws.cell(current_row, 1)
        cell.value = "DOOR"
        cell.font = Font(size=11, bold=True)
        cell.alignment = CENTER_ALIGN
        cell.fill = BANNER_FILL

        if plan.unseated:
            current_row += 2
            cell = ws.cell(current_row, 1)
            cell.value = (f"⚠ {len(plan.unseated)} students without a seat: "
                          f"{plan.unseated[0]}-{plan.unseated[-1]}")
            cell.font = WARNING_FONT

        for col in range(1, plan.cols + 1):
            ws.column_dimensions[get_column_letter(col)].width = 10

    def _format_seat_list(self, ws):
        headers = ["Roll Number", "Hall", "Row", "Column"]
        for col_idx, header in enumerate(headers, 1):
            cell = ws.cell(1, col_idx, header)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = HEADER_FILL
            cell.alignment = CENTER_ALIGN
            cell.border = THIN_BORDER

        entries = []
        for plan in self.plans:
            for r, row in enumerate(plan.seats, 1):
                for c, seat in enumerate(row, 1):
                    if seat is not None:
                        entries.append((seat, self._hall_label(plan.hall_id), r, c))
        entries.sort(key=lambda e: e[0])

        for row_idx, entry in enumerate(entries, 2):
            for col_idx, value in enumerate(entry, 1):
                cell = ws.cell(row_idx, col_idx, value)
                cell.alignment = CENTER_ALIGN
                cell.border = THIN_BORDER

        ws.column_dimensions["A"].width = 15
        ws.column_dimensions["B"].width = 30
        ws.column_dimensions["C"].width = 8
        ws.column_dimensions["D"].width = 8
