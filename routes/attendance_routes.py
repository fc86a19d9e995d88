from datetime import date

from flask import Blueprint, request, jsonify

from services import attendance_service
from utils.decorators import auth_required

attendance_bp = Blueprint("attendance", __name__, url_prefix="/api/attendance")


@attendance_bp.route("", methods=["GET"])
@auth_required
def attendance_for_date():
    on_date = request.args.get("date") or date.today()
    rows = attendance_service.attendance_for_date(on_date, class_label=request.args.get("class"))
    return jsonify(rows)


@attendance_bp.route("", methods=["POST"])
@auth_required
def submit_attendance():
    data = request.get_json(silent=True) or {}
    records = attendance_service.mark_attendance(data.get("date"), data.get("entries") or [])
    return jsonify({
        "status": "success",
        "records": [r.to_dict() for r in records]
    })


@attendance_bp.route("/<int:attendance_id>", methods=["PATCH"])
@auth_required
def correct_status(attendance_id):
    data = request.get_json(silent=True) or {}
    record = attendance_service.correct_status(attendance_id, data.get("status"))
    return jsonify({"status": "success", "record": record.to_dict()})


@attendance_bp.route("/student/<int:student_id>")
@auth_required
def student_history(student_id):
    records = attendance_service.student_history(
        student_id,
        start=request.args.get("start"),
        end=request.args.get("end")
    )
    return jsonify([r.to_dict() for r in records])
