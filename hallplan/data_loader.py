"""
Data loader for hall planning.
"""

import os
import pandas as pd
from typing import Dict, List
from .models import Exam, Hall, HallAssignment, HallRangeAssignment, StaffPreference, YearBreakdown
from . import utils

YEAR_COLUMNS = [f"year_{year}" for year in utils.YEARS]


def _optional_int(value):
    if value is None or pd.isna(value):
        return None
    return int(value)


def _text(value, default=""):
    if value is None or pd.isna(value):
        return default
    return str(value).strip()


def _flag(value) -> bool:
    return _text(value).lower() in ("1", "true", "yes", "y")


class PlanDataLoader:
    """Loads exams, halls, hall plans and staff bookings from CSV files."""

    def __init__(self, data_dir=utils.DATA_DIR):
        self.data_dir = data_dir
        self.exams: List[Exam] = []
        self.halls: Dict[str, Hall] = {}
        self.assignments: Dict[str, HallAssignment] = {}
        self.preferences: List[StaffPreference] = []

    def load_all_data(self):
        """Load all data from CSV files."""
        self.load_exams()
        self.load_halls()
        self.load_hall_plan()
        self.load_staff_preferences()
        print(f"✓ Loaded {len(self.exams)} exams")
        print(f"✓ Loaded {len(self.halls)} halls")
        print(f"✓ Loaded hall plans for {len(self.assignments)} exams")
        print(f"✓ Loaded {len(self.preferences)} staff bookings")

    def _read(self, filename):
        df = pd.read_csv(os.path.join(self.data_dir, filename))
        df.columns = df.columns.str.strip()
        return df

    def load_exams(self):
        """Load exams from exams.csv"""
        try:
            df = self._read("exams.csv")
            has_breakdown = all(col in df.columns for col in YEAR_COLUMNS)

            for _, row in df.iterrows():
                breakdown = None
                if has_breakdown:
                    breakdown = YearBreakdown(
                        **{col: _optional_int(row[col]) or 0 for col in YEAR_COLUMNS}
                    )
                exam = Exam(
                    exam_id=_text(row["exam_id"]),
                    subject=_text(row["subject"]),
                    department=_text(row.get("department")),
                    date=_text(row["date"]),
                    session=_text(row["session"]),
                    total_students=int(row["total_students"]),
                    year_breakdown=breakdown,
                    is_published=_flag(row.get("is_published")),
                )
                self.exams.append(exam)

        except FileNotFoundError:
            print(f"⚠ Warning: exams.csv not found in {self.data_dir}")

    def load_halls(self):
        """Load halls from halls.csv"""
        try:
            df = self._read("halls.csv")

            for _, row in df.iterrows():
                hall = Hall(
                    hall_id=_text(row["hall_id"]),
                    name=_text(row["name"]),
                    number=_text(row.get("number"), _text(row["hall_id"])),
                    location=_text(row.get("location")),
                    capacity=int(row["capacity"]),
                    department=_text(row.get("department")),
                )
                self.halls[hall.hall_id] = hall

        except FileNotFoundError:
            print(f"⚠ Warning: halls.csv not found in {self.data_dir}")

    def load_hall_plan(self):
        """
        Load hall_plan.csv: one row per (exam, hall) with the roll number
        range and, optionally, the seating grid.
        """
        try:
            df = self._read("hall_plan.csv")

            for _, row in df.iterrows():
                exam_id = _text(row["exam_id"])
                hall_id = _text(row["hall_id"])
                hall = self.halls.get(hall_id)
                if hall is None:
                    print(f"⚠ Skipping plan row for unknown hall {hall_id} ({exam_id})")
                    continue

                entry = HallRangeAssignment(
                    hall_id=hall_id,
                    capacity=hall.capacity,
                    range_start=_optional_int(row.get("range_start")),
                    range_end=_optional_int(row.get("range_end")),
                    seating_rows=_optional_int(row.get("rows")),
                    seating_cols=_optional_int(row.get("cols")),
                    seating_order=_text(row.get("order"), utils.DEFAULT_SEATING_ORDER),
                )
                assignment = self.assignments.setdefault(exam_id, HallAssignment(exam_id=exam_id))
                assignment.halls.append(entry)

        except FileNotFoundError:
            print(f"⚠ Warning: hall_plan.csv not found in {self.data_dir}")

    def load_staff_preferences(self):
        """Load staff_preferences.csv (optional)."""
        path = os.path.join(self.data_dir, "staff_preferences.csv")
        if not os.path.exists(path):
            return

        df = self._read("staff_preferences.csv")
        for _, row in df.iterrows():
            self.preferences.append(StaffPreference(
                staff_id=_text(row["staff_id"]),
                date=_text(row["date"]),
                session=_text(row["session"]),
                notes=_text(row.get("notes")),
            ))
