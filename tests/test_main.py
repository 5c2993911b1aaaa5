"""
tests/test_main.py

End-to-end run of the seating generator over the sample data directory.
"""
import os
import tempfile
import shutil
import openpyxl

from main import generate_hall_seating

SAMPLE_DATA = os.path.join(os.path.dirname(__file__), '..', 'data')


def test_generates_one_workbook_per_exam():
    output_dir = tempfile.mkdtemp()
    try:
        written = generate_hall_seating(SAMPLE_DATA, output_dir)
        names = sorted(os.path.basename(p) for p in written)
        assert names == ["Seating_EX101_FN.xlsx", "Seating_EX102_AN.xlsx", "Seating_EX103_FN.xlsx"]

        wb = openpyxl.load_workbook(os.path.join(output_dir, "Seating_EX101_FN.xlsx"))
        assert wb.sheetnames == ["Hall_H1", "Hall_H2", "Seat List"]
        # 5 x 2 column-major grid for students 1-10
        ws = wb["Hall_H1"]
        assert ws.cell(6, 1).value == 1
        assert ws.cell(6, 2).value == 6
        # 5 x 4 row-major grid for students 11-30
        ws = wb["Hall_H2"]
        assert [ws.cell(6, c).value for c in range(1, 5)] == [11, 12, 13, 14]
    finally:
        shutil.rmtree(output_dir)


def test_empty_data_dir_writes_nothing():
    data_dir = tempfile.mkdtemp()
    try:
        assert generate_hall_seating(data_dir, os.path.join(data_dir, "out")) == []
    finally:
        shutil.rmtree(data_dir)
