"""
Unit tests for data loading functionality.
Tests CSV parsing of exams, halls, hall plans and staff bookings.
"""

import os
import csv
import tempfile
import shutil
import pytest

from hallplan.data_loader import PlanDataLoader
from hallplan.seating import compute_year_ranges


def create_test_csv(filename, headers, rows):
    """Helper function to create test CSV files."""
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        writer.writerows(rows)


@pytest.fixture
def data_dir():
    temp_dir = tempfile.mkdtemp()
    create_test_csv(
        os.path.join(temp_dir, 'exams.csv'),
        ['exam_id', 'subject', 'department', 'date', 'session', 'total_students',
         'year_1', 'year_2', 'year_3', 'year_4', 'is_published'],
        [
            ['EX1', 'Data Structures', 'CSE', '2025-12-01', 'FN', '30', '0', '0', '15', '15', 'yes'],
            ['EX2', 'English', 'CSE', '2025-12-02', 'AN', '12', '0', '0', '0', '0', 'no'],
        ]
    )
    create_test_csv(
        os.path.join(temp_dir, 'halls.csv'),
        ['hall_id', 'name', 'number', 'location', 'capacity', 'department'],
        [
            ['H1', 'Main Hall', '101', 'Block A', '20', 'CSE'],
            ['H2', 'Main Hall', '102', 'Block A', '20', 'CSE'],
        ]
    )
    create_test_csv(
        os.path.join(temp_dir, 'hall_plan.csv'),
        ['exam_id', 'hall_id', 'range_start', 'range_end', 'rows', 'cols', 'order'],
        [
            ['EX1', 'H1', '1', '10', '5', '2', 'column'],
            ['EX1', 'H2', '11', '30', '', '', ''],
            ['EX2', 'H9', '1', '12', '4', '3', 'row'],
        ]
    )
    yield temp_dir
    shutil.rmtree(temp_dir)


def test_load_all_data(data_dir):
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()

    assert len(loader.exams) == 2
    assert set(loader.halls) == {"H1", "H2"}
    assert loader.preferences == []

    exams = {e.exam_id: e for e in loader.exams}
    exam = exams["EX1"]
    assert exam.session == "FN"
    assert exam.is_published
    assert exam.year_breakdown.to_dict() == {"1": 0, "2": 0, "3": 15, "4": 15}
    assert not exams["EX2"].is_published


def test_hall_plan_rows(data_dir):
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()

    assignment = loader.assignments["EX1"]
    h1, h2 = assignment.halls
    assert (h1.range_start, h1.range_end, h1.seating_rows, h1.seating_cols) == (1, 10, 5, 2)
    assert h1.capacity == 20
    assert h2.has_range
    assert not h2.has_seating
    assert h2.seating_order == "column"

    # Unknown hall H9 is skipped
    assert "EX2" not in loader.assignments


def test_zero_breakdown_loads_as_unset(data_dir):
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()

    exam = loader.exams[1]
    assert exam.exam_id == "EX2"
    assert not exam.year_breakdown.is_set
    assert compute_year_ranges(exam.year_breakdown, exam.total_students) is None


def test_exams_without_year_columns():
    temp_dir = tempfile.mkdtemp()
    try:
        create_test_csv(
            os.path.join(temp_dir, 'exams.csv'),
            [' exam_id ', 'subject', 'date', 'session', 'total_students'],
            [['EX7', 'Physics', '2025-12-03', 'an', '25']]
        )
        loader = PlanDataLoader(data_dir=temp_dir)
        loader.load_exams()

        assert len(loader.exams) == 1
        assert loader.exams[0].exam_id == "EX7"
        assert loader.exams[0].session == "AN"
        assert loader.exams[0].year_breakdown is None
    finally:
        shutil.rmtree(temp_dir)


def test_missing_files_do_not_crash():
    temp_dir = tempfile.mkdtemp()
    try:
        loader = PlanDataLoader(data_dir=temp_dir)
        loader.load_all_data()
        assert loader.exams == []
        assert loader.halls == {}
        assert loader.assignments == {}
    finally:
        shutil.rmtree(temp_dir)


def test_staff_preferences(data_dir):
    create_test_csv(
        os.path.join(data_dir, 'staff_preferences.csv'),
        ['staff_id', 'date', 'session', 'notes'],
        [['S1', '2025-12-01', 'fn', ''], ['S2', '2025-12-01', 'FN', 'front desk']]
    )
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()

    assert [p.staff_id for p in loader.preferences] == ["S1", "S2"]
    assert loader.preferences[0].session == "FN"
    assert loader.preferences[0].notes == ""
