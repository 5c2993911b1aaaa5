"""
hallplan/utils.py
"""
import os
from datetime import date, datetime
from typing import List, Optional, Tuple

# --- Core Seating Constants ---
YEARS: List[int] = [1, 2, 3, 4]
SEATING_ORDERS: Tuple[str, str] = ("row", "column")
DEFAULT_SEATING_ORDER: str = "column"
SESSIONS: Tuple[str, str] = ("FN", "AN")

# Students without a year are seated after every real year
NULL_YEAR_SORT_KEY: int = 999

# --- Staff Allocation Constants ---
MIN_STAFF_PER_HALL: int = 1
MAX_STAFF_PER_HALL: int = 10

# --- Environment ---
DATA_DIR: str = os.environ.get("HALLPLAN_DATA_DIR", "data")
OUTPUT_DIR: str = os.environ.get("HALLPLAN_OUTPUT_DIR", "output")


def get_default_staff_per_hall() -> int:
    """
    Reads STAFF_PER_HALL from the environment, falling back to 1.
    Values outside 1..10 are clamped to the nearest bound.
    """
    raw = os.environ.get("STAFF_PER_HALL", "1")
    try:
        value = int(raw)
    except ValueError:
        print(f"⚠ Warning: STAFF_PER_HALL={raw!r} is not a number, using {MIN_STAFF_PER_HALL}")
        return MIN_STAFF_PER_HALL
    if value < MIN_STAFF_PER_HALL:
        return MIN_STAFF_PER_HALL
    if value > MAX_STAFF_PER_HALL:
        print(f"⚠ Warning: STAFF_PER_HALL={value} is above {MAX_STAFF_PER_HALL}, using {MAX_STAFF_PER_HALL}")
        return MAX_STAFF_PER_HALL
    return value


def normalize_order(order) -> str:
    if not order:
        return DEFAULT_SEATING_ORDER
    return str(order).strip().lower()


def range_size(start: int, end: int) -> int:
    """Number of integers in [start, end]; 0 for an inverted range."""
    if end < start:
        return 0
    return end - start + 1


def overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> Tuple[int, int]:
    """
    Returns the intersection of two closed ranges as (start, end).
    The result is empty when start > end.
    """
    return max(a_start, b_start), min(a_end, b_end)


def parse_year_key(key) -> int:
    """'1'..'4' or 1..4 -> int year; -1 when the key is not a year."""
    try:
        year = int(str(key).strip())
    except ValueError:
        return -1
    return year if year in YEARS else -1


def parse_date(value) -> Optional[date]:
    """
    Calendar day of an exam or booking date.

    Accepts date/datetime objects and 'YYYY-MM-DD' strings, with or
    without zero padding and with an optional time part
    ('2025-12-1', '2025-12-01 09:00', '2025-12-01T09:00').
    Returns None when the value is not a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        return None
    text = str(value).strip().replace("T", " ")
    if not text:
        return None
    try:
        return datetime.strptime(text.split()[0], "%Y-%m-%d").date()
    except ValueError:
        return None


def same_day(a, b) -> bool:
    day = parse_date(a)
    return day is not None and day == parse_date(b)
