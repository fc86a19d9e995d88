from datetime import date

from flask import Blueprint, render_template
from flask_login import current_user

from models import Student, User
from models.attendance import PRESENT
from models.user import TEACHER
from services.attendance_service import attendance_for_date
from utils.decorators import auth_required, role_required

pages_bp = Blueprint("pages", __name__)


@pages_bp.route("/dashboard")
@auth_required
def dashboard():
    today = attendance_for_date(date.today())
    marked = [r for r in today if r["status"]]
    return render_template(
        "dashboard.html",
        user=current_user,
        students_count=len(today),
        marked_count=len(marked),
        present_count=sum(1 for r in marked if r["status"] == PRESENT),
    )


@pages_bp.route("/mark-attendance")
@auth_required
def mark_attendance():
    return render_template("mark_attendance.html", today=date.today().isoformat())


@pages_bp.route("/manage-students")
@auth_required
def manage_students():
    return render_template("manage_students.html")


@pages_bp.route("/view-reports")
@auth_required
def view_reports():
    return render_template("view_reports.html")


@pages_bp.route("/admin-dashboard")
@role_required("admin")
def admin_dashboard():
    return render_template(
        "admin_dashboard.html",
        users=User.query.order_by(User.name.asc()).all(),
        students_count=Student.query.count(),
        teacher_count=User.query.filter_by(role=TEACHER).count(),
    )
