from datetime import date
from io import BytesIO

import pandas as pd
import pytest

from conftest import make_student
from extensions import db
from models import Attendance, Student
from services import attendance_service, roster_service
from services.errors import DuplicateRecordError, NotFoundError, ValidationError


def test_create_student_strips_and_blanks_fields(ctx):
    student = roster_service.create_student({
        "name": "  Meera Iyer ",
        "roll_number": "B001",
        "register_number": "",
        "class_label": "ECE-A",
        "unknown_field": "ignored",
    })

    assert student.id is not None
    assert student.name == "Meera Iyer"
    assert student.register_number is None
    assert student.class_label == "ECE-A"


def test_create_student_with_existing_roll_number_fails(ctx):
    roster_service.create_student({"name": "First", "roll_number": "A001"})

    with pytest.raises(DuplicateRecordError):
        roster_service.create_student({"name": "Second", "roll_number": "A001"})

    assert Student.query.count() == 1
    assert Student.query.one().name == "First"


def test_create_student_requires_name_and_roll_number(ctx):
    with pytest.raises(ValidationError) as exc_info:
        roster_service.create_student({"name": "Nameless roll"})
    assert "roll_number" in exc_info.value.message


def test_list_students_filters(ctx):
    make_student(roll_number="A002", name="Diya Patel", class_label="CSE-A")
    make_student(roll_number="A001", name="Aarav Sharma", class_label="CSE-A")
    make_student(roll_number="B001", name="Meera Iyer", class_label="ECE-A")

    assert [s.roll_number for s in roster_service.list_students()] == ["A001", "A002", "B001"]
    assert [s.roll_number for s in roster_service.list_students(class_label="ECE-A")] == ["B001"]
    assert [s.name for s in roster_service.list_students(search="diya")] == ["Diya Patel"]


def test_get_missing_student(ctx):
    with pytest.raises(NotFoundError):
        roster_service.get_student(42)


def test_update_student_propagates_to_attendance_copies(ctx):
    student = make_student(register_number="REG001")
    attendance_service.mark_attendance(date(2026, 3, 2), [{"student_id": student.id, "status": "Present"}])

    roster_service.update_student(student.id, {"name": "Aarav S.", "register_number": "REG777"})

    db.session.expire_all()
    record = Attendance.query.one()
    assert record.student_name == "Aarav S."
    assert record.register_number == "REG777"


def test_roll_number_change_refreshes_fallback_register_number(ctx):
    student = make_student(roll_number="R1")
    attendance_service.mark_attendance(date(2026, 3, 2), [{"student_id": student.id, "status": "Present"}])

    roster_service.update_student(student.id, {"roll_number": "R2"})

    db.session.expire_all()
    assert Attendance.query.one().register_number == "R2"


def test_update_student_to_taken_roll_number_fails(ctx):
    make_student(roll_number="A001")
    other = make_student(roll_number="A002", name="Diya Patel")

    with pytest.raises(DuplicateRecordError):
        roster_service.update_student(other.id, {"roll_number": "A001"})

    assert db.session.get(Student, other.id).roll_number == "A002"


def test_update_student_cannot_blank_required_field(ctx):
    student = make_student()
    with pytest.raises(ValidationError):
        roster_service.update_student(student.id, {"name": "   "})


def test_delete_student_removes_history(ctx):
    student = make_student()
    attendance_service.mark_attendance(date(2026, 3, 2), [{"student_id": student.id, "status": "Absent"}])

    roster_service.delete_student(student.id)

    assert Student.query.count() == 0
    assert Attendance.query.count() == 0


def _xlsx(rows):
    output = BytesIO()
    pd.DataFrame(rows).to_excel(output, index=False, engine="openpyxl")
    output.seek(0)
    return output


def test_import_students_reports_bad_and_duplicate_rows(ctx):
    make_student(roll_number="A001")
    upload = _xlsx([
        {"Roll Number": "A001", "Student Name": "Already There", "Class": "CSE-A"},
        {"Roll Number": "A002", "Student Name": "Diya Patel", "Class": "CSE-A"},
        {"Roll Number": "A002", "Student Name": "Diya Again", "Class": "CSE-A"},
        {"Roll Number": None, "Student Name": "No Roll", "Class": "CSE-A"},
        {"Roll Number": "A003", "Student Name": "Kabir Nair", "Class": "CSE-B"},
    ])

    result = roster_service.import_students(upload)

    assert result["created"] == 2
    assert len(result["errors"]) == 3
    assert result["errors"][0].startswith("Row 2:")
    assert {s.roll_number for s in Student.query.all()} == {"A001", "A002", "A003"}
    assert db.session.query(Student.class_label).filter_by(roll_number="A003").scalar() == "CSE-B"


def test_import_students_requires_columns(ctx):
    with pytest.raises(ValidationError):
        roster_service.import_students(_xlsx([{"Name": "Wrong header"}]))


def test_student_template_has_upload_headers(ctx):
    df = pd.read_excel(roster_service.student_template())
    assert list(df.columns) == list(roster_service.UPLOAD_COLUMNS)
