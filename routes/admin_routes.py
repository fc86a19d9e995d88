from flask import Blueprint, request, jsonify, send_file, current_app

from extensions import db
from models import User
from models.user import TEACHER
from services import roster_service, report_service
from services.errors import ValidationError
from services.persistence import commit
from utils.decorators import role_required
from utils.password_utils import hash_password

admin_bp = Blueprint("admin", __name__)


# =========================================================
# MANUAL TEACHER RECORD CREATION
# =========================================================
@admin_bp.route("/api/create-teacher", methods=["POST"])
@role_required("admin")
def create_teacher():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip()

    if not name or not email:
        raise ValidationError("name and email are required")

    teacher = User(
        staff_id=(data.get("staff_id") or "").strip() or None,
        name=name,
        email=email,
        role=TEACHER,
        auth_user_id=data.get("user_id") or None,
    )
    if data.get("password"):
        teacher.password = hash_password(data["password"])

    db.session.add(teacher)
    commit("A user with this email or staff id already exists")
    current_app.logger.info("Teacher record created for %s", teacher.email)

    return jsonify({"success": True, "data": teacher.to_dict()}), 201


@admin_bp.route("/admin/roster.pdf")
@role_required("admin")
def roster_pdf():
    students = roster_service.list_students(class_label=request.args.get("class"))
    return send_file(
        report_service.roster_pdf(students),
        mimetype="application/pdf",
        as_attachment=True,
        download_name="student_roster.pdf"
    )
