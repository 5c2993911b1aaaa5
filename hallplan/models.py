"""
hallplan/models.py

Data models for exams, halls, hall plans and seating matrices.
"""

from typing import List, Optional, Dict, Tuple
from dataclasses import dataclass, field
from . import utils


@dataclass
class YearBreakdown:
    """
    Number of students from each academic year sitting one exam.
    Only years 1-4 exist, so each gets its own slot.
    """
    year_1: int = 0
    year_2: int = 0
    year_3: int = 0
    year_4: int = 0

    @classmethod
    def from_mapping(cls, mapping: Optional[Dict]) -> Optional["YearBreakdown"]:
        """Builds a breakdown from {"1": n, ...}; None stays None."""
        if mapping is None:
            return None
        counts = {}
        for key, value in mapping.items():
            year = utils.parse_year_key(key)
            if year == -1:
                raise ValueError(f"Year breakdown only supports years 1-4, got '{key}'")
            counts[f"year_{year}"] = int(value or 0)
        return cls(**counts)

    def count(self, year: int) -> int:
        if year not in utils.YEARS:
            raise ValueError(f"Invalid year: {year}")
        return getattr(self, f"year_{year}")

    def counts(self) -> List[Tuple[int, int]]:
        """(year, count) pairs in ascending year order."""
        return [(year, self.count(year)) for year in utils.YEARS]

    @property
    def total(self) -> int:
        return sum(count for _, count in self.counts())

    @property
    def is_set(self) -> bool:
        return self.total != 0

    def to_dict(self) -> Dict[str, int]:
        return {str(year): count for year, count in self.counts()}


@dataclass(frozen=True)
class YearRange:
    """A contiguous block of roll numbers belonging to one year."""
    year: int
    start: int
    end: int
    count: int

    def to_dict(self) -> Dict[str, int]:
        return {"year": self.year, "start": self.start, "end": self.end, "count": self.count}


@dataclass
class Hall:
    """
    Represents a single exam hall.
    """
    hall_id: str
    name: str
    number: str
    location: str
    capacity: int
    department: str = ""
    is_active: bool = True

    def __post_init__(self):
        self.hall_id = str(self.hall_id).strip()
        self.number = str(self.number).strip()
        self.department = self.department.upper().strip()


@dataclass
class HallRangeAssignment:
    """
    One hall inside an exam's hall assignment, with its roll number
    range and seating configuration once they have been planned.
    """
    hall_id: str
    capacity: int
    range_start: Optional[int] = None
    range_end: Optional[int] = None
    seating_rows: Optional[int] = None
    seating_cols: Optional[int] = None
    seating_order: str = utils.DEFAULT_SEATING_ORDER
    assigned_staff: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.hall_id = str(self.hall_id).strip()
        self.seating_order = utils.normalize_order(self.seating_order)

    @property
    def has_range(self) -> bool:
        return bool(self.range_start) and bool(self.range_end)

    @property
    def has_seating(self) -> bool:
        return bool(self.seating_rows) and bool(self.seating_cols)

    @property
    def total_seats(self) -> int:
        if not self.has_range:
            return 0
        return utils.range_size(self.range_start, self.range_end)


@dataclass(frozen=True)
class PlannedRange:
    """A requested roll number range for one hall."""
    hall_id: str
    start: int
    end: int


@dataclass
class Exam:
    """Represents a scheduled exam for one subject."""
    exam_id: str
    subject: str
    department: str
    date: str
    session: str  # 'FN' or 'AN'
    total_students: int
    year_breakdown: Optional[YearBreakdown] = None
    is_published: bool = False
    status: str = "scheduled"

    def __post_init__(self):
        self.exam_id = str(self.exam_id).strip()
        self.session = self.session.upper().strip()
        self.department = self.department.upper().strip()
        if self.session not in utils.SESSIONS:
            raise ValueError(f"Session must be FN or AN, got '{self.session}'")


@dataclass
class HallAssignment:
    """All halls assigned to one exam."""
    exam_id: str
    halls: List[HallRangeAssignment] = field(default_factory=list)

    @property
    def total_capacity(self) -> int:
        return sum(h.capacity or 0 for h in self.halls)

    def get_hall(self, hall_id: str) -> Optional[HallRangeAssignment]:
        for hall in self.halls:
            if hall.hall_id == str(hall_id):
                return hall
        return None


@dataclass
class StaffPreference:
    """A staff member's booking for a date and session."""
    staff_id: str
    date: str
    session: str
    notes: str = ""

    def __post_init__(self):
        self.session = self.session.upper().strip()


@dataclass
class SeatingPlan:
    """
    The seat matrix generated for one hall. Never stored; it is rebuilt
    from the hall's range and seating configuration on every request.
    """
    hall_id: str
    range_start: int
    range_end: int
    rows: int
    cols: int
    order: str
    seats: List[List[Optional[int]]]
    unseated: List[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return utils.range_size(self.range_start, self.range_end)

    @property
    def filled(self) -> int:
        return sum(1 for row in self.seats for seat in row if seat is not None)

    def find_seat(self, number: int) -> Optional[Tuple[int, int]]:
        """Returns the 1-based (row, col) of a roll number, or None."""
        for r, row in enumerate(self.seats):
            for c, seat in enumerate(row):
                if seat == number:
                    return r + 1, c + 1
        return None

    def to_dict(self) -> Dict:
        return {
            "hallId": self.hall_id,
            "rangeStart": self.range_start,
            "rangeEnd": self.range_end,
            "rows": self.rows,
            "cols": self.cols,
            "order": self.order,
            "seats": self.seats,
            "total": self.total,
            "unseated": self.unseated,
        }
