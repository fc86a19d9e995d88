from flask import Blueprint, request, jsonify, send_file

from services import roster_service
from services.errors import ValidationError
from utils.decorators import auth_required

students_bp = Blueprint("students", __name__, url_prefix="/api/students")


@students_bp.route("", methods=["GET"])
@auth_required
def list_students():
    students = roster_service.list_students(
        search=request.args.get("q"),
        class_label=request.args.get("class")
    )
    return jsonify([s.to_dict() for s in students])


@students_bp.route("", methods=["POST"])
@auth_required
def add_student():
    student = roster_service.create_student(request.get_json(silent=True) or {})
    return jsonify({"status": "success", "student": student.to_dict()}), 201


@students_bp.route("/<int:student_id>", methods=["GET"])
@auth_required
def get_student(student_id):
    return jsonify(roster_service.get_student(student_id).to_dict())


@students_bp.route("/<int:student_id>", methods=["PUT", "PATCH"])
@auth_required
def update_student(student_id):
    student = roster_service.update_student(student_id, request.get_json(silent=True) or {})
    return jsonify({"status": "success", "student": student.to_dict()})


@students_bp.route("/<int:student_id>", methods=["DELETE"])
@auth_required
def delete_student(student_id):
    roster_service.delete_student(student_id)
    return jsonify({"status": "deleted"})


# =========================================================
# BULK UPLOAD
# =========================================================

@students_bp.route("/template")
@auth_required
def download_template():
    return send_file(
        roster_service.student_template(),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name="student_upload_template.xlsx"
    )


@students_bp.route("/upload", methods=["POST"])
@auth_required
def upload_students():
    file = request.files.get("file")
    if not file or file.filename == "":
        raise ValidationError("No file uploaded")

    if not file.filename.lower().endswith(".xlsx"):
        raise ValidationError("Invalid file format. Only .xlsx files are accepted.")

    result = roster_service.import_students(file)

    message = f"Successfully added {result['created']} students."
    if result["errors"]:
        message += f" {len(result['errors'])} rows skipped."

    return jsonify({"status": "success", "message": message, **result})
