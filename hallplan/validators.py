"""
hallplan/validators.py

Checks run on an exam's hall plan before seating is generated.
"""

from typing import List, Dict, Iterable, Optional
from .models import Exam, HallAssignment, PlannedRange, YearBreakdown
from . import utils


class PlanError(ValueError):
    """A hall plan or seating request is malformed."""


class ConflictError(PlanError):
    """Two hall ranges of the same exam intersect."""

    def __init__(self, first: PlannedRange, second: PlannedRange):
        self.first = first
        self.second = second
        super().__init__(
            f"Ranges must not overlap: hall {first.hall_id} ({first.start}-{first.end}) "
            f"and hall {second.hall_id} ({second.start}-{second.end})"
        )


class CapacityError(PlanError):
    """More students than seats."""


def validate_non_overlapping(ranges: Iterable[PlannedRange]) -> None:
    """Raises ConflictError for the first pair of intersecting ranges."""
    ordered = sorted(ranges, key=lambda r: r.start)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.start <= prev.end:
            raise ConflictError(prev, nxt)


def validate_hall_plan(ranges: List[PlannedRange], total_students: int) -> None:
    """
    Every range must lie within 1..total_students with start <= end,
    and no two ranges may overlap.
    """
    if not ranges:
        raise PlanError("At least one hall range is required")
    for r in ranges:
        if r.start < 1 or r.end < r.start or r.end > total_students:
            raise PlanError(
                f"Invalid range values for hall {r.hall_id}: {r.start}-{r.end} "
                f"(exam has {total_students} students)"
            )
    validate_non_overlapping(ranges)


def apply_hall_plan(assignment: HallAssignment, ranges: List[PlannedRange],
                    total_students: int) -> HallAssignment:
    """Validates the plan and writes each range onto its hall."""
    validate_hall_plan(ranges, total_students)
    by_hall = {r.hall_id: r for r in ranges}
    for hall in assignment.halls:
        plan = by_hall.get(hall.hall_id)
        if plan:
            hall.range_start = plan.start
            hall.range_end = plan.end
    return assignment


def check_hall_capacity(assignment: HallAssignment, total_students: int) -> None:
    if assignment.total_capacity < total_students:
        raise CapacityError(
            f"Total hall capacity ({assignment.total_capacity}) is less than "
            f"total students ({total_students})"
        )


def validate_seating_dimensions(rows, cols) -> None:
    for name, value in (("rows", rows), ("cols", cols)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise PlanError(f"{name} must be a positive integer, got {value!r}")


def validate_seating_order(order) -> str:
    """Normalises a requested fill order; missing means column."""
    normalized = utils.normalize_order(order)
    if normalized not in utils.SEATING_ORDERS:
        raise PlanError(f"order must be one of {', '.join(utils.SEATING_ORDERS)}, got {order!r}")
    return normalized


def validate_staff_per_hall(value) -> int:
    try:
        num = int(value)
    except (TypeError, ValueError):
        raise PlanError(f"Staff per hall must be an integer, got {value!r}")
    if num < utils.MIN_STAFF_PER_HALL or num > utils.MAX_STAFF_PER_HALL:
        raise PlanError(
            f"Staff per hall must be between {utils.MIN_STAFF_PER_HALL} "
            f"and {utils.MAX_STAFF_PER_HALL}"
        )
    return num


def validate_year_breakdown(breakdown: Optional[YearBreakdown], total_students: int) -> List[str]:
    """Counts must be non-negative and sum to 0 (not set) or total_students."""
    issues = []
    if breakdown is None:
        return issues
    for year, count in breakdown.counts():
        if count < 0:
            issues.append(f"Year {year} has a negative student count ({count})")
    if breakdown.total not in (0, total_students):
        issues.append(
            f"Year breakdown sums to {breakdown.total}, expected 0 or {total_students}"
        )
    return issues


def validate_all(exams: List[Exam], assignments: Dict[str, HallAssignment]) -> bool:
    """
    Runs every plan check over all exams and prints a report.
    """
    print("\n--- RUNNING HALL PLAN VALIDATION ---")

    breakdown_issues = _check_year_breakdowns(exams)
    capacity_issues = _check_capacities(exams, assignments)
    range_issues = _check_ranges(exams, assignments)
    seat_issues = _check_seat_counts(assignments)

    if not breakdown_issues and not capacity_issues and not range_issues and not seat_issues:
        print("Validation PASSED: All hall plans are consistent.")
        return True

    print("Validation FAILED:")
    for label, issues in (("year breakdown", breakdown_issues),
                          ("capacity", capacity_issues),
                          ("range", range_issues),
                          ("seating", seat_issues)):
        if issues:
            print(f"  Found {len(issues)} {label} issue(s).")
            for issue in issues: print(f"    - {issue}")
    return False


def _check_year_breakdowns(exams: List[Exam]) -> List[str]:
    issues = []
    for exam in exams:
        for issue in validate_year_breakdown(exam.year_breakdown, exam.total_students):
            issues.append(f"{exam.exam_id}: {issue}")
    return issues


def _check_capacities(exams: List[Exam], assignments: Dict[str, HallAssignment]) -> List[str]:
    issues = []
    for exam in exams:
        assignment = assignments.get(exam.exam_id)
        if assignment is None:
            continue
        try:
            check_hall_capacity(assignment, exam.total_students)
        except CapacityError as e:
            issues.append(f"{exam.exam_id}: {e}")
    return issues


def _check_ranges(exams: List[Exam], assignments: Dict[str, HallAssignment]) -> List[str]:
    issues = []
    for exam in exams:
        assignment = assignments.get(exam.exam_id)
        if assignment is None:
            continue
        ranges = [
            PlannedRange(h.hall_id, h.range_start, h.range_end)
            for h in assignment.halls if h.has_range
        ]
        if not ranges:
            continue
        try:
            validate_hall_plan(ranges, exam.total_students)
        except PlanError as e:
            issues.append(f"{exam.exam_id}: {e}")
    return issues


def _check_seat_counts(assignments: Dict[str, HallAssignment]) -> List[str]:
    """
    Flags halls whose grid is smaller than their range. Generation still
    succeeds for these, but the extra students get no seat.
    """
    issues = []
    for exam_id, assignment in assignments.items():
        for hall in assignment.halls:
            if not hall.has_range or not hall.has_seating:
                continue
            seats = hall.seating_rows * hall.seating_cols
            if seats < hall.total_seats:
                issues.append(
                    f"{exam_id}: hall {hall.hall_id} seats {seats} of "
                    f"{hall.total_seats} students in range {hall.range_start}-{hall.range_end}"
                )
    return sorted(issues)
