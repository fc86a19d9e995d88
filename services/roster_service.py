import logging
from io import BytesIO

import pandas as pd

from extensions import db
from models.attendance import Attendance
from models.student import Student
from services.errors import NotFoundError, ValidationError
from services.persistence import commit

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "roll_number")

# Spreadsheet header -> Student field
UPLOAD_COLUMNS = {
    "Roll Number": "roll_number",
    "Student Name": "name",
    "Register Number": "register_number",
    "Admission Year": "admission_year",
    "Course Type": "course_type",
    "Course": "course",
    "Branch": "branch",
    "Academic Year": "academic_year",
    "Verification": "verification",
    "Class": "class_label",
}


def clean_fields(data):
    """Keep editable fields only; strip strings and turn blanks into None."""
    cleaned = {}
    for field in Student.EDITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if value is not None:
            value = str(value).strip() or None
        cleaned[field] = value
    return cleaned


def _duplicate_message(roll_number):
    return f"Roll number {roll_number} already exists"


def list_students(search=None, class_label=None):
    query = Student.query
    if class_label:
        query = query.filter(Student.class_label == class_label)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            db.or_(
                Student.name.ilike(pattern),
                Student.roll_number.ilike(pattern),
                Student.register_number.ilike(pattern),
            )
        )
    return query.order_by(Student.roll_number.asc()).all()


def get_student(student_id):
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError(f"Student {student_id} not found")
    return student


def create_student(data):
    fields = clean_fields(data or {})
    missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    student = Student(**fields)
    db.session.add(student)
    commit(_duplicate_message(fields["roll_number"]))
    logger.info("Student %s created", student.roll_number)
    return student


def update_student(student_id, data):
    student = get_student(student_id)
    fields = clean_fields(data or {})

    for field in REQUIRED_FIELDS:
        if field in fields and not fields[field]:
            raise ValidationError(f"{field} is required")

    for field, value in fields.items():
        setattr(student, field, value)

    # Keep the copies on past marks in step with the roster
    if {"name", "register_number", "roll_number"} & fields.keys():
        with db.session.no_autoflush:
            Attendance.query.filter_by(student_id=student.id).update(
                {
                    Attendance.student_name: student.name,
                    Attendance.register_number: student.register_number or student.roll_number,
                },
                synchronize_session="fetch",
            )

    commit(_duplicate_message(student.roll_number))
    return student


def delete_student(student_id):
    student = get_student(student_id)
    roll_number = student.roll_number
    db.session.delete(student)
    db.session.commit()
    logger.info("Student %s deleted with its attendance history", roll_number)


# =========================================================
# BULK UPLOAD
# =========================================================

def student_template():
    df = pd.DataFrame(columns=list(UPLOAD_COLUMNS))
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Students")
    output.seek(0)
    return output


def import_students(file):
    """Add students from an .xlsx upload; existing roll numbers are reported, not overwritten."""
    try:
        df = pd.read_excel(file, dtype=str)
    except Exception as exc:
        raise ValidationError(f"Could not read spreadsheet: {exc}") from exc

    df.columns = [str(c).strip() for c in df.columns]
    missing = [col for col in ("Roll Number", "Student Name") if col not in df.columns]
    if missing:
        raise ValidationError(f"Missing columns: {', '.join(missing)}")

    existing = {r for (r,) in db.session.query(Student.roll_number).all()}
    created = 0
    errors = []

    for index, row in df.iterrows():
        line = index + 2
        data = {
            field: (None if pd.isna(row.get(header)) else row.get(header))
            for header, field in UPLOAD_COLUMNS.items()
        }
        fields = clean_fields(data)

        if not fields.get("roll_number") or not fields.get("name"):
            errors.append(f"Row {line}: Roll Number and Student Name are required.")
            continue

        if fields["roll_number"] in existing:
            errors.append(f"Row {line}: Roll Number {fields['roll_number']} already exists.")
            continue

        db.session.add(Student(**fields))
        existing.add(fields["roll_number"])
        created += 1

    commit("Upload contains a roll number that already exists")
    logger.info("Imported %d students (%d rows rejected)", created, len(errors))
    return {"created": created, "errors": errors}
