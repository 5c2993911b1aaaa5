"""
hallplan/staff_allocator.py

Distributes invigilators across the halls of an exam.
"""

import random
from typing import List, Optional, Dict
from .models import Exam, HallAssignment, StaffPreference
from .validators import validate_staff_per_hall
from . import utils


def find_candidates(exam: Exam, preferences: List[StaffPreference]) -> List[StaffPreference]:
    """Staff who booked the exam's day and session."""
    return [
        p for p in preferences
        if p.session == exam.session and utils.same_day(p.date, exam.date)
    ]


def allocate_staff(assignment: HallAssignment,
                   candidates: List[StaffPreference],
                   staff_per_hall: Optional[int] = None,
                   rng: Optional[random.Random] = None) -> Dict[str, List[str]]:
    """
    Shuffles the candidates and deals staff_per_hall of them to each hall
    in order. When there are not enough candidates the last halls get
    fewer (or none). Overwrites assigned_staff on every hall.

    Returns {hall_id: [staff_id, ...]}.
    """
    if staff_per_hall is None:
        staff_per_hall = utils.get_default_staff_per_hall()
    staff_per_hall = validate_staff_per_hall(staff_per_hall)
    rng = rng or random.Random()

    shuffled = list(candidates)
    rng.shuffle(shuffled)

    total_needed = len(assignment.halls) * staff_per_hall
    chosen = [c.staff_id for c in shuffled[:total_needed]]

    allocation: Dict[str, List[str]] = {}
    idx = 0
    for hall in assignment.halls:
        hall.assigned_staff = chosen[idx:idx + staff_per_hall]
        idx += staff_per_hall
        allocation[hall.hall_id] = hall.assigned_staff

    if len(chosen) < total_needed:
        print(f"⚠ Only {len(chosen)} of {total_needed} invigilators available for exam {assignment.exam_id}")

    return allocation
