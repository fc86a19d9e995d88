import logging
from datetime import date, datetime

from extensions import db
from models.attendance import Attendance, ATTENDANCE_STATUSES
from models.student import Student
from services.errors import NotFoundError, ValidationError
from services.persistence import commit

logger = logging.getLogger(__name__)


def parse_date(value, field="date"):
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid {field} '{value}', expected YYYY-MM-DD") from exc


def validate_status(status):
    if status not in ATTENDANCE_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Expected one of: {', '.join(ATTENDANCE_STATUSES)}"
        )
    return status


def mark_attendance(on_date, entries):
    """Record one status per student for a date.

    A student already marked on that date has the existing row's status
    corrected instead of getting a second row. The batch is all or nothing.
    """
    on_date = parse_date(on_date)
    if not entries:
        raise ValidationError("No attendance entries provided")
    if not isinstance(entries, list):
        raise ValidationError("entries must be a list")

    statuses = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each entry must be an object with student_id and status")
        student_id = entry.get("student_id")
        if student_id is None:
            raise ValidationError("Each entry needs a student_id")
        try:
            student_id = int(student_id)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid student_id '{student_id}'") from exc
        statuses[student_id] = validate_status(entry.get("status"))

    students = {
        s.id: s for s in Student.query.filter(Student.id.in_(statuses)).all()
    }
    unknown = sorted(set(statuses) - set(students))
    if unknown:
        raise NotFoundError(f"Unknown student ids: {', '.join(map(str, unknown))}")

    existing = {
        a.student_id: a
        for a in Attendance.query.filter(
            Attendance.student_id.in_(statuses),
            Attendance.date == on_date,
        ).all()
    }

    records = []
    for student_id, status in statuses.items():
        student = students[student_id]
        record = existing.get(student_id)
        if record is None:
            record = Attendance(
                student_id=student.id,
                student_name=student.name,
                register_number=student.register_number or student.roll_number,
                date=on_date,
                status=status,
            )
            db.session.add(record)
        else:
            record.status = status
        records.append(record)

    commit("Attendance already recorded for this student and date")
    logger.info("Marked attendance for %d students on %s", len(records), on_date)
    return records


def correct_status(attendance_id, status):
    record = db.session.get(Attendance, attendance_id)
    if not record:
        raise NotFoundError(f"Attendance record {attendance_id} not found")

    record.status = validate_status(status)
    db.session.commit()
    return record


def attendance_for_date(on_date, class_label=None):
    """Roster for a date with each student's status, None when not marked yet."""
    on_date = parse_date(on_date)

    query = (
        db.session.query(Student, Attendance)
        .outerjoin(
            Attendance,
            db.and_(Attendance.student_id == Student.id, Attendance.date == on_date),
        )
    )
    if class_label:
        query = query.filter(Student.class_label == class_label)

    rows = query.order_by(Student.roll_number.asc()).all()
    return [
        {
            "student_id": student.id,
            "name": student.name,
            "roll_number": student.roll_number,
            "register_number": student.register_number,
            "class_label": student.class_label,
            "attendance_id": record.id if record else None,
            "status": record.status if record else None,
        }
        for student, record in rows
    ]


def student_history(student_id, start=None, end=None):
    if not db.session.get(Student, student_id):
        raise NotFoundError(f"Student {student_id} not found")

    query = Attendance.query.filter(Attendance.student_id == student_id)
    if start:
        query = query.filter(Attendance.date >= parse_date(start, "start"))
    if end:
        query = query.filter(Attendance.date <= parse_date(end, "end"))
    return query.order_by(Attendance.date.asc()).all()
