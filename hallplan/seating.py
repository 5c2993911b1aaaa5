"""
hallplan/seating.py

Year-range partitioning and seat matrix generation for exam halls.

An exam's students are numbered 1..total_students, lower years first.
Each hall of the exam is given a contiguous slice of those numbers; the
functions here work out which year each number in the slice belongs to
and lay the numbers into the hall's rows x cols grid.
"""

from typing import List, Optional, Tuple
from .models import YearBreakdown, YearRange, HallRangeAssignment, SeatingPlan
from .validators import CapacityError
from . import utils

Student = Tuple[int, Optional[int]]  # (roll number, year)


def compute_year_ranges(year_breakdown: Optional[YearBreakdown],
                        total_students: int) -> Optional[List[YearRange]]:
    """
    Assigns each non-zero year a block of roll numbers, in year order,
    starting from 1. Returns None when there is no breakdown to use.

    total_students is accepted for symmetry with the exam record; the
    counts are trusted as given.
    """
    if year_breakdown is None or not year_breakdown.is_set:
        return None

    year_ranges = []
    current_pos = 1
    for year, count in year_breakdown.counts():
        if count > 0:
            year_ranges.append(YearRange(
                year=year,
                start=current_pos,
                end=current_pos + count - 1,
                count=count
            ))
            current_pos += count

    return year_ranges if year_ranges else None


def _sort_key(student: Student) -> Tuple[int, int]:
    number, year = student
    return (year if year is not None else utils.NULL_YEAR_SORT_KEY, number)


def select_students(hall_start: int, hall_end: int,
                    year_ranges: Optional[List[YearRange]]) -> List[Student]:
    """
    Returns the (number, year) pairs seated in a hall, year first and
    ascending roll number within a year.
    """
    if not year_ranges:
        return [(number, None) for number in range(hall_start, hall_end + 1)]

    students: List[Student] = []
    for year_range in year_ranges:
        overlap_start, overlap_end = utils.overlap(
            year_range.start, year_range.end, hall_start, hall_end
        )
        for number in range(overlap_start, overlap_end + 1):
            students.append((number, year_range.year))

    students.sort(key=_sort_key)
    return students


def fill_matrix(students: List[Student], rows: int, cols: int,
                order: str = utils.DEFAULT_SEATING_ORDER) -> List[List[Optional[int]]]:
    """
    Writes student numbers into a rows x cols grid. 'column' fills
    top-to-bottom then moves right; anything else fills left-to-right
    then moves down. Cells past the last student stay None.
    """
    seats: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]

    if utils.normalize_order(order) == "column":
        cells = ((r, c) for c in range(cols) for r in range(rows))
    else:
        cells = ((r, c) for r in range(rows) for c in range(cols))

    for (r, c), (number, _) in zip(cells, students):
        seats[r][c] = number

    return seats


def generate_seating(hall_start: int, hall_end: int,
                     year_ranges: Optional[List[YearRange]],
                     rows: int, cols: int,
                     order: str = utils.DEFAULT_SEATING_ORDER,
                     strict: bool = False) -> List[List[Optional[int]]]:
    """
    Builds the seat matrix for one hall.

    Students that do not fit in rows x cols are left out. With
    strict=True a CapacityError is raised instead.
    """
    students = select_students(hall_start, hall_end, year_ranges)
    if strict and len(students) > rows * cols:
        raise CapacityError(
            f"Range {hall_start}-{hall_end} has {len(students)} students "
            f"but the grid only has {rows * cols} seats"
        )
    return fill_matrix(students, rows, cols, order)


def build_seating_plan(hall: HallRangeAssignment,
                       year_ranges: Optional[List[YearRange]],
                       rows: Optional[int] = None,
                       cols: Optional[int] = None,
                       order: Optional[str] = None) -> SeatingPlan:
    """
    Generates a SeatingPlan for a planned hall, using the hall's stored
    seating configuration unless rows/cols/order are given.
    """
    if not hall.has_range:
        raise ValueError(f"Range for hall {hall.hall_id} is not set")

    rows = rows or hall.seating_rows
    cols = cols or hall.seating_cols
    if not rows or not cols:
        raise ValueError(f"Seating for hall {hall.hall_id} is not configured")
    order = utils.normalize_order(order or hall.seating_order)

    students = select_students(hall.range_start, hall.range_end, year_ranges)
    seats = fill_matrix(students, rows, cols, order)
    unseated = [number for number, _ in students[rows * cols:]]

    return SeatingPlan(
        hall_id=hall.hall_id,
        range_start=hall.range_start,
        range_end=hall.range_end,
        rows=rows,
        cols=cols,
        order=order,
        seats=seats,
        unseated=unseated
    )
