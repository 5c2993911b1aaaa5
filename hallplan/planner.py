"""
hallplan/planner.py

In-memory hall planning workflow: book halls, record hall plans,
generate and re-generate seating, and allocate invigilators. Records are held in
memory only; the web app and the command line both drive this class.
"""

import random
from datetime import date
from typing import List, Dict, Optional, Tuple
from .models import (
    Exam, Hall, HallAssignment, HallRangeAssignment, PlannedRange, SeatingPlan, StaffPreference,
)
from .seating import compute_year_ranges, build_seating_plan
from .validators import (
    PlanError, apply_hall_plan, check_hall_capacity,
    validate_seating_dimensions, validate_seating_order, validate_staff_per_hall,
)
from .staff_allocator import find_candidates, allocate_staff
from . import utils

# Exams in these states keep their halls booked for the slot
ACTIVE_EXAM_STATUSES = ("scheduled", "ongoing")


class NotFoundError(LookupError):
    """A referenced exam, hall or assignment does not exist."""


class AccessError(PermissionError):
    """A staff member asked for a hall they do not invigilate."""



class PlannerStore:

    def __init__(self,
                 exams: Optional[List[Exam]] = None,
                 halls: Optional[Dict[str, Hall]] = None,
                 assignments: Optional[Dict[str, HallAssignment]] = None,
                 preferences: Optional[List[StaffPreference]] = None):
        self.exams: Dict[str, Exam] = {e.exam_id: e for e in (exams or [])}
        self.halls: Dict[str, Hall] = dict(halls or {})
        self.assignments: Dict[str, HallAssignment] = dict(assignments or {})
        self.preferences: List[StaffPreference] = list(preferences or [])
        # Coordinator setting; None falls back to STAFF_PER_HALL
        self.staff_per_hall: Optional[int] = None

    @classmethod
    def from_loader(cls, loader) -> "PlannerStore":
        return cls(loader.exams, loader.halls, loader.assignments, loader.preferences)

    def get_exam(self, exam_id: str) -> Exam:
        exam = self.exams.get(str(exam_id))
        if exam is None:
            raise NotFoundError("Exam not found")
        return exam

    def get_assignment(self, exam_id: str) -> HallAssignment:
        assignment = self.assignments.get(str(exam_id))
        if assignment is None:
            raise NotFoundError("Hall assignment not found")
        return assignment

    # --- Hall assignment ---

    def _halls_in_use(self, exam: Exam) -> set:
        """Halls held by other active exams on the same day and session."""
        busy = set()
        for other in self.exams.values():
            if other.exam_id == exam.exam_id or other.session != exam.session:
                continue
            if str(other.status).lower() not in ACTIVE_EXAM_STATUSES:
                continue
            if not utils.same_day(other.date, exam.date):
                continue
            assignment = self.assignments.get(other.exam_id)
            if assignment is not None:
                busy.update(h.hall_id for h in assignment.halls)
        return busy

    def assign_halls(self, exam_id: str, hall_ids: List[str], replace: bool = False) -> HallAssignment:
        """
        Books halls for a published exam.

        Without replace the halls are added to the ones already booked,
        and halls that were already booked keep their range, grid and
        staff. With replace the exam gets exactly the given halls, each
        starting empty.

        Every hall must be active, belong to the exam's department and be
        free for the exam's day and session, and together they must seat
        all of the exam's students.
        """
        hall_ids = [str(h).strip() for h in (hall_ids or []) if str(h).strip()]
        if not hall_ids:
            raise PlanError("examId and hallIds[] are required")

        exam = self.get_exam(exam_id)
        if not exam.is_published:
            raise PlanError("Exam must be published before assigning halls")

        existing = self.assignments.get(exam.exam_id)
        kept: Dict[str, HallRangeAssignment] = {}
        if existing is not None and not replace:
            kept = {h.hall_id: h for h in existing.halls}
            hall_ids = list(kept) + hall_ids
        hall_ids = list(dict.fromkeys(hall_ids))

        halls = [self.halls.get(hall_id) for hall_id in hall_ids]
        if any(hall is None or not hall.is_active for hall in halls):
            raise PlanError("One or more halls not found")
        if any(hall.department != exam.department for hall in halls):
            raise PlanError("All halls must belong to the exam's department")
        if self._halls_in_use(exam) & set(hall_ids):
            raise PlanError("One or more halls are already assigned for this date/session")

        assignment = HallAssignment(exam.exam_id, halls=[
            kept.get(hall.hall_id) or HallRangeAssignment(hall.hall_id, capacity=hall.capacity)
            for hall in halls
        ])
        check_hall_capacity(assignment, exam.total_students)

        self.assignments[exam.exam_id] = assignment
        return assignment

    def save_plan(self, exam_id: str, ranges: List[PlannedRange]) -> HallAssignment:
        exam = self.get_exam(exam_id)
        assignment = self.assignments.get(exam.exam_id)
        if assignment is None:
            raise PlanError("Assign halls before planning ranges")
        return apply_hall_plan(assignment, ranges, exam.total_students)

    # --- Seating ---

    def generate_seating(self, exam_id: str, hall_id: str, rows: int, cols: int,
                         order: Optional[str] = None) -> SeatingPlan:
        """Generates a hall's seat matrix and keeps rows/cols/order for later reads."""
        validate_seating_dimensions(rows, cols)
        order = validate_seating_order(order)
        exam = self.get_exam(exam_id)
        assignment = self.get_assignment(exam.exam_id)
        hall = assignment.get_hall(hall_id)
        if hall is None or not hall.has_range:
            raise PlanError("Range for this hall is not set")

        year_ranges = compute_year_ranges(exam.year_breakdown, exam.total_students)
        plan = build_seating_plan(hall, year_ranges, rows, cols, order)

        hall.seating_rows = plan.rows
        hall.seating_cols = plan.cols
        hall.seating_order = plan.order
        return plan

    def get_seating(self, exam_id: str, hall_id: str) -> Optional[SeatingPlan]:
        """
        Rebuilds a hall's seat matrix from its stored configuration.
        Returns None when the range or grid has not been set yet.
        """
        exam = self.get_exam(exam_id)
        assignment = self.get_assignment(exam.exam_id)
        hall = assignment.get_hall(hall_id)
        if hall is None:
            raise NotFoundError("Hall not found in assignment")
        if not hall.has_range or not hall.has_seating:
            return None

        year_ranges = compute_year_ranges(exam.year_breakdown, exam.total_students)
        return build_seating_plan(hall, year_ranges)

    def seating_plans(self, exam_id: str) -> List[SeatingPlan]:
        """All halls of an exam that have both a range and a grid."""
        assignment = self.get_assignment(exam_id)
        plans = []
        for hall in assignment.halls:
            plan = self.get_seating(exam_id, hall.hall_id)
            if plan is not None:
                plans.append(plan)
        return plans

    def find_student_seat(self, exam_id: str, number: int) -> Tuple[SeatingPlan, int, int]:
        """Hall plan and 1-based (row, col) of one roll number."""
        exam = self.get_exam(exam_id)
        if number < 1 or number > exam.total_students:
            raise PlanError(f"Roll number must be between 1 and {exam.total_students}")
        for plan in self.seating_plans(exam.exam_id):
            seat = plan.find_seat(number)
            if seat is not None:
                return plan, seat[0], seat[1]
        raise NotFoundError(f"No seat generated for roll number {number}")

    # --- Staff ---

    def get_staff_per_hall(self) -> int:
        if self.staff_per_hall is not None:
            return self.staff_per_hall
        return utils.get_default_staff_per_hall()

    def set_staff_per_hall(self, value) -> int:
        self.staff_per_hall = validate_staff_per_hall(value)
        return self.staff_per_hall

    def allocate_staff(self, exam_id: str, staff_per_hall: Optional[int] = None,
                       rng: Optional[random.Random] = None) -> Dict[str, List[str]]:
        exam = self.get_exam(exam_id)
        assignment = self.assignments.get(exam.exam_id)
        if assignment is None:
            raise PlanError("Assign halls to this exam first")
        if staff_per_hall is None:
            staff_per_hall = self.get_staff_per_hall()
        candidates = find_candidates(exam, self.preferences)
        return allocate_staff(assignment, candidates, staff_per_hall, rng)

    def staff_halls(self, staff_id: str) -> List[Tuple[Exam, List[HallRangeAssignment]]]:
        """Exams, by date, where the staff member invigilates, with their halls."""
        result = []
        for exam_id, assignment in self.assignments.items():
            exam = self.exams.get(exam_id)
            if exam is None:
                continue
            mine = [h for h in assignment.halls if staff_id in h.assigned_staff]
            if mine:
                result.append((exam, mine))
        result.sort(key=lambda item: utils.parse_date(item[0].date) or date.max)
        return result

    def staff_seating(self, staff_id: str, exam_id: str, hall_id: str) -> Optional[SeatingPlan]:
        """Seat matrix for a hall the staff member invigilates."""
        hall = self.get_assignment(self.get_exam(exam_id).exam_id).get_hall(hall_id)
        if hall is None:
            raise NotFoundError("Hall not found in assignment")
        if staff_id not in hall.assigned_staff:
            raise AccessError("You are not assigned to this hall")
        return self.get_seating(exam_id, hall_id)
