"""
tests/test_validators.py

Unit tests for hall plan validation.
Requires 'pytest' to run.
"""
import pytest
from hallplan.models import (
    Exam, HallAssignment, HallRangeAssignment, PlannedRange, YearBreakdown,
)
from hallplan.validators import (
    ConflictError, CapacityError, PlanError,
    validate_non_overlapping, validate_hall_plan, apply_hall_plan,
    check_hall_capacity, validate_seating_dimensions, validate_seating_order, validate_staff_per_hall,
    validate_year_breakdown, validate_all,
)


@pytest.fixture
def two_hall_assignment() -> HallAssignment:
    return HallAssignment("EX1", halls=[
        HallRangeAssignment("H1", capacity=20),
        HallRangeAssignment("H2", capacity=15),
    ])


def test_overlapping_ranges_conflict():
    """Ranges 1-20 and 15-25 intersect since 15 <= 20."""
    first = PlannedRange("H1", 1, 20)
    second = PlannedRange("H2", 15, 25)

    with pytest.raises(ConflictError) as excinfo:
        validate_non_overlapping([second, first])

    assert excinfo.value.first == first
    assert excinfo.value.second == second
    assert "overlap" in str(excinfo.value)


def test_touching_ranges_conflict():
    with pytest.raises(ConflictError):
        validate_non_overlapping([PlannedRange("H1", 1, 10), PlannedRange("H2", 10, 20)])


def test_adjacent_ranges_are_fine():
    validate_non_overlapping([
        PlannedRange("H3", 21, 30),
        PlannedRange("H1", 1, 10),
        PlannedRange("H2", 11, 20),
    ])
    validate_non_overlapping([])


def test_hall_plan_bounds():
    with pytest.raises(PlanError):
        validate_hall_plan([PlannedRange("H1", 0, 10)], 30)
    with pytest.raises(PlanError):
        validate_hall_plan([PlannedRange("H1", 10, 5)], 30)
    with pytest.raises(PlanError):
        validate_hall_plan([PlannedRange("H1", 1, 31)], 30)
    with pytest.raises(PlanError):
        validate_hall_plan([], 30)
    validate_hall_plan([PlannedRange("H1", 1, 30)], 30)


def test_apply_hall_plan_writes_ranges(two_hall_assignment):
    apply_hall_plan(two_hall_assignment, [PlannedRange("H2", 21, 30), PlannedRange("H1", 1, 20)], 30)
    h1, h2 = two_hall_assignment.halls
    assert (h1.range_start, h1.range_end) == (1, 20)
    assert (h2.range_start, h2.range_end) == (21, 30)
    assert h2.total_seats == 10


def test_apply_hall_plan_rejects_overlap_without_writing(two_hall_assignment):
    with pytest.raises(ConflictError):
        apply_hall_plan(two_hall_assignment, [PlannedRange("H1", 1, 20), PlannedRange("H2", 15, 25)], 30)
    assert not any(h.has_range for h in two_hall_assignment.halls)


def test_hall_capacity(two_hall_assignment):
    check_hall_capacity(two_hall_assignment, 35)
    with pytest.raises(CapacityError):
        check_hall_capacity(two_hall_assignment, 36)


def test_seating_dimensions():
    validate_seating_dimensions(5, 2)
    for rows, cols in [(0, 2), (5, -1), ("5", 2), (True, 2), (2.5, 2)]:
        with pytest.raises(PlanError):
            validate_seating_dimensions(rows, cols)


def test_seating_order():
    assert validate_seating_order(None) == "column"
    assert validate_seating_order(" ROW ") == "row"
    assert validate_seating_order("Column") == "column"
    with pytest.raises(PlanError):
        validate_seating_order("diagonal")


def test_staff_per_hall_bounds():
    assert validate_staff_per_hall("3") == 3
    assert validate_staff_per_hall(10) == 10
    for value in [0, 11, "many", None]:
        with pytest.raises(PlanError):
            validate_staff_per_hall(value)


def test_year_breakdown_sum():
    assert validate_year_breakdown(None, 30) == []
    assert validate_year_breakdown(YearBreakdown(), 30) == []
    assert validate_year_breakdown(YearBreakdown(year_3=15, year_4=15), 30) == []

    issues = validate_year_breakdown(YearBreakdown(year_3=10), 30)
    assert len(issues) == 1
    assert "sums to 10" in issues[0]

    issues = validate_year_breakdown(YearBreakdown(year_1=-5, year_2=35), 30)
    assert any("negative" in issue for issue in issues)


def test_validate_all_reports_problems():
    exam = Exam("EX1", "Maths", "CSE", "2025-12-01", "FN", 30,
                year_breakdown=YearBreakdown(year_3=15, year_4=15))
    good = HallAssignment("EX1", halls=[
        HallRangeAssignment("H1", 20, range_start=1, range_end=15, seating_rows=5, seating_cols=3),
        HallRangeAssignment("H2", 20, range_start=16, range_end=30, seating_rows=5, seating_cols=3),
    ])
    assert validate_all([exam], {"EX1": good}) is True

    bad = HallAssignment("EX1", halls=[
        HallRangeAssignment("H1", 20, range_start=1, range_end=20, seating_rows=2, seating_cols=2),
        HallRangeAssignment("H2", 5, range_start=15, range_end=30),
    ])
    assert validate_all([exam], {"EX1": bad}) is False
