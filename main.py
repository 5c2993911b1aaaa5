"""
main.py

Main entry point for hall seating generation.
Loads the hall plan from data/, validates it and writes one seating
workbook per exam to output/seating/.
"""

import os
import sys
from hallplan import utils
from hallplan.data_loader import PlanDataLoader
from hallplan.planner import PlannerStore
from hallplan.validators import validate_all
from hallplan.exporter import SeatingExporter

# --- Configuration ---
DATA_DIR = utils.DATA_DIR
OUTPUT_DIR = os.path.join(utils.OUTPUT_DIR, "seating")


def generate_hall_seating(data_dir=DATA_DIR, output_dir=OUTPUT_DIR):
    """Generate seating workbooks for every planned exam. Returns the files written."""
    print("=" * 90)
    print("EXAM HALL PLAN & SEATING GENERATOR".center(90))
    print("=" * 90)

    # Step 1: Load data
    print("\n📂 Loading data...")
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()

    if not loader.exams:
        print("\n❌ No exams found! Please create data/exams.csv")
        return []

    if not loader.assignments:
        print("\n❌ No hall plan found! Please create data/hall_plan.csv")
        return []

    # Step 2: Validate
    if not validate_all(loader.exams, loader.assignments):
        print("\n⚠️  Continuing with the exams that can be seated.")

    store = PlannerStore.from_loader(loader)

    # Step 3: Invigilators
    if store.preferences:
        print("\n👥 Allocating invigilators...")
        for exam_id in store.assignments:
            if exam_id in store.exams:
                allocation = store.allocate_staff(exam_id)
                print(f"  ✓ {exam_id}: {sum(len(s) for s in allocation.values())} staff across {len(allocation)} halls")

    # Step 4: Seating + export
    print("\n🔄 Generating seating arrangements...")
    written = []
    for exam_id, exam in store.exams.items():
        if exam_id not in store.assignments:
            print(f"  ⚠ {exam_id}: no halls assigned")
            continue
        plans = store.seating_plans(exam_id)
        if not plans:
            print(f"  ⚠ {exam_id}: no hall has both a range and a seating grid")
            continue
        for plan in plans:
            print(f"    ✓ {exam_id} / {plan.hall_id}: {plan.filled} seated")
            if plan.unseated:
                print(f"    ⚠ {exam_id} / {plan.hall_id}: {len(plan.unseated)} students without a seat")
        written.append(SeatingExporter(exam, plans, store.halls).export(output_dir))

    print("\n" + "=" * 90)
    print("✓ SEATING GENERATION COMPLETE!".center(90))
    print("=" * 90)
    print(f"\nLocation: {output_dir}/")
    return written


if __name__ == "__main__":
    data_dir = sys.argv[1] if len(sys.argv) > 1 else DATA_DIR
    generate_hall_seating(data_dir)
