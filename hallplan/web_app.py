"""
Flask JSON API for hall plans and seating arrangements.
Run: python -m hallplan.web_app
Visit: http://localhost:5000/api/exams
"""

from flask import Flask, jsonify, send_file, request

from .data_loader import PlanDataLoader
from .exporter import SeatingExporter
from .models import PlannedRange
from .planner import PlannerStore, NotFoundError, AccessError
from .validators import PlanError
from . import utils

app = Flask(__name__)

# Global state
current_store = PlannerStore()


def initialize_store(data_dir=utils.DATA_DIR):
    """Load planning data on startup."""
    global current_store

    print("\n📊 Initializing hall planner...")
    loader = PlanDataLoader(data_dir=data_dir)
    loader.load_all_data()
    current_store = PlannerStore.from_loader(loader)
    return current_store


def _to_int(value, name):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PlanError(f"{name} must be an integer")


@app.errorhandler(PlanError)
def handle_plan_error(error):
    return jsonify({"message": str(error)}), 400


@app.errorhandler(NotFoundError)
def handle_not_found(error):
    return jsonify({"message": str(error)}), 404


@app.errorhandler(AccessError)
def handle_access_error(error):
    return jsonify({"message": str(error)}), 403


@app.route('/api/exams')
def api_exams():
    """List exams with their year breakdown."""
    exams = [
        {
            "examId": e.exam_id,
            "subject": e.subject,
            "date": e.date,
            "session": e.session,
            "totalStudents": e.total_students,
            "yearBreakdown": e.year_breakdown.to_dict() if e.year_breakdown else None,
        }
        for e in current_store.exams.values()
    ]
    return jsonify({"exams": exams})


def _assignment_json(assignment):
    halls = [
        {
            "hallId": h.hall_id,
            "capacity": h.capacity,
            "rangeStart": h.range_start,
            "rangeEnd": h.range_end,
            "totalSeats": h.total_seats,
            "seatingRows": h.seating_rows,
            "seatingCols": h.seating_cols,
            "seatingOrder": h.seating_order,
            "assignedStaff": h.assigned_staff,
        }
        for h in assignment.halls
    ]
    return {
        "examId": assignment.exam_id,
        "totalCapacity": assignment.total_capacity,
        "halls": halls,
    }


def _unset_seating_json(hall_id, hall):
    return {
        "hallId": hall_id,
        "rangeStart": hall.range_start,
        "rangeEnd": hall.range_end,
        "seats": None,
        "message": "Seating arrangement not yet set for this hall",
    }


@app.route('/api/hall-assignments', methods=['POST'])
def api_assign_halls():
    """Book halls for a published exam; replace=true drops the current ones."""
    body = request.get_json(silent=True) or {}
    exam_id = body.get("examId")
    hall_ids = body.get("hallIds")
    if not exam_id or not isinstance(hall_ids, list) or not hall_ids:
        return jsonify({"message": "examId and hallIds[] are required"}), 400

    assignment = current_store.assign_halls(exam_id, hall_ids, bool(body.get("replace")))
    return jsonify(_assignment_json(assignment))


@app.route('/api/hall-assignments/<exam_id>')
def api_assignment(exam_id):
    return jsonify(_assignment_json(current_store.get_assignment(exam_id)))


@app.route('/api/hall-assignments/plan', methods=['PUT'])
def api_save_plan():
    """Set roll number ranges for the halls of an exam."""
    body = request.get_json(silent=True) or {}
    exam_id = body.get("examId")
    plans = body.get("plans")
    if not exam_id or not isinstance(plans, list) or not plans:
        return jsonify({"message": "examId and plans[] are required"}), 400

    ranges = [
        PlannedRange(
            hall_id=str(p.get("hallId")),
            start=_to_int(p.get("rangeStart"), "rangeStart"),
            end=_to_int(p.get("rangeEnd"), "rangeEnd"),
        )
        for p in plans
    ]
    assignment = current_store.save_plan(exam_id, ranges)
    return jsonify({
        "message": "Hall plan saved",
        "halls": [
            {"hallId": h.hall_id, "rangeStart": h.range_start, "rangeEnd": h.range_end}
            for h in assignment.halls
        ],
    })


@app.route('/api/hall-assignments/seating', methods=['POST'])
def api_generate_seating():
    """Generate the seat matrix for one hall."""
    body = request.get_json(silent=True) or {}
    exam_id = body.get("examId")
    hall_id = body.get("hallId")
    if not exam_id or not hall_id or not body.get("rows") or not body.get("cols"):
        return jsonify({"message": "examId, hallId, rows, cols are required"}), 400

    rows = _to_int(body.get("rows"), "rows")
    cols = _to_int(body.get("cols"), "cols")
    plan = current_store.generate_seating(exam_id, str(hall_id), rows, cols, body.get("order"))
    return jsonify(plan.to_dict())


@app.route('/api/hall-assignments/seating/<exam_id>/<hall_id>')
def api_get_seating(exam_id, hall_id):
    """Seat matrix rebuilt from the stored configuration."""
    plan = current_store.get_seating(exam_id, hall_id)
    if plan is None:
        hall = current_store.get_assignment(exam_id).get_hall(hall_id)
        return jsonify(_unset_seating_json(hall_id, hall))
    return jsonify(plan.to_dict())


@app.route('/api/exams/<exam_id>/allocate-staff', methods=['POST'])
def api_allocate_staff(exam_id):
    body = request.get_json(silent=True) or {}
    staff_per_hall = body.get("staffPerHall")
    allocation = current_store.allocate_staff(exam_id, staff_per_hall)
    return jsonify({"message": "Allocation completed", "halls": allocation})


@app.route('/api/exams/<exam_id>/seats/<int:number>')
def api_find_seat(exam_id, number):
    """Hall, row and column of one student."""
    plan, row, col = current_store.find_student_seat(exam_id, number)
    hall = current_store.halls.get(plan.hall_id)
    return jsonify({
        "examId": exam_id,
        "rollNumber": number,
        "hallId": plan.hall_id,
        "hallName": hall.name if hall else None,
        "row": row,
        "col": col,
    })


@app.route('/api/settings/staff-per-hall')
def api_get_staff_per_hall():
    return jsonify({"value": current_store.get_staff_per_hall()})


@app.route('/api/settings/staff-per-hall', methods=['PUT'])
def api_set_staff_per_hall():
    body = request.get_json(silent=True) or {}
    return jsonify({"value": current_store.set_staff_per_hall(body.get("value"))})


@app.route('/api/staff/<staff_id>/halls')
def api_staff_halls(staff_id):
    """Exams and halls a staff member invigilates."""
    result = []
    for exam, halls in current_store.staff_halls(staff_id):
        hall_data = []
        for h in halls:
            hall = current_store.halls.get(h.hall_id)
            hall_data.append({
                "hallId": h.hall_id,
                "hallName": hall.name if hall else None,
                "hallNumber": hall.number if hall else None,
                "hallLocation": hall.location if hall else None,
                "capacity": h.capacity,
                "rangeStart": h.range_start,
                "rangeEnd": h.range_end,
                "totalSeats": h.total_seats,
                "seatingRows": h.seating_rows,
                "seatingCols": h.seating_cols,
                "seatingOrder": h.seating_order,
            })
        result.append({
            "exam": {
                "examId": exam.exam_id,
                "subject": exam.subject,
                "date": exam.date,
                "session": exam.session,
                "totalStudents": exam.total_students,
                "yearBreakdown": exam.year_breakdown.to_dict() if exam.year_breakdown else None,
            },
            "halls": hall_data,
        })
    return jsonify(result)


@app.route('/api/staff/<staff_id>/seating/<exam_id>/<hall_id>')
def api_staff_seating(staff_id, exam_id, hall_id):
    plan = current_store.staff_seating(staff_id, exam_id, hall_id)
    if plan is None:
        hall = current_store.get_assignment(exam_id).get_hall(hall_id)
        return jsonify(_unset_seating_json(hall_id, hall))
    return jsonify(plan.to_dict())


@app.route('/api/exams/<exam_id>/seating.xlsx')
def api_download_seating(exam_id):
    """Download all seat matrices of an exam as Excel."""
    exam = current_store.get_exam(exam_id)
    plans = current_store.seating_plans(exam.exam_id)
    if not plans:
        return jsonify({"message": "No seating generated for this exam yet"}), 400

    exporter = SeatingExporter(exam, plans, current_store.halls)
    return send_file(
        exporter.to_bytes(),
        as_attachment=True,
        download_name=f"Seating_{exam.exam_id}.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


if __name__ == '__main__':
    print("=" * 70)
    print("🌐 Starting Hall Planner API".center(70))
    print("=" * 70)

    initialize_store()

    print("\n📍 Open your browser and visit: http://localhost:5000/api/exams")
    print("⚡ Press Ctrl+C to stop the server\n")
    print("=" * 70)
    app.run(debug=False, port=5000)
