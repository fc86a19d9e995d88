from datetime import date
from io import BytesIO

import pandas as pd
import pytest

from conftest import make_student
from services import attendance_service, report_service
from services.errors import ValidationError

START = date(2026, 3, 1)
END = date(2026, 3, 31)


@pytest.fixture
def marked(ctx):
    a = make_student(roll_number="A001", name="Aarav Sharma", class_label="CSE-A")
    b = make_student(roll_number="A002", name="Diya Patel", class_label="CSE-A")
    make_student(roll_number="B001", name="Meera Iyer", class_label="ECE-A")

    attendance_service.mark_attendance(date(2026, 3, 2), [
        {"student_id": a.id, "status": "Present"},
        {"student_id": b.id, "status": "Absent"},
    ])
    attendance_service.mark_attendance(date(2026, 3, 3), [
        {"student_id": a.id, "status": "Present"},
        {"student_id": b.id, "status": "Present"},
    ])
    attendance_service.mark_attendance(date(2026, 3, 4), [
        {"student_id": a.id, "status": "Absent"},
    ])
    # Outside the reporting window
    attendance_service.mark_attendance(date(2026, 4, 1), [
        {"student_id": a.id, "status": "Absent"},
    ])


def test_attendance_summary(marked):
    rows = {r["roll_number"]: r for r in report_service.attendance_summary(START, END)}

    assert rows["A001"]["present"] == 2
    assert rows["A001"]["absent"] == 1
    assert rows["A001"]["total"] == 3
    assert rows["A001"]["percentage"] == 66.67
    assert rows["A002"]["percentage"] == 50.0


def test_summary_with_no_marks_has_zero_percentage(marked):
    rows = {r["roll_number"]: r for r in report_service.attendance_summary(START, END)}
    assert rows["B001"]["total"] == 0
    assert rows["B001"]["percentage"] == 0


def test_summary_class_filter(marked):
    rows = report_service.attendance_summary(START, END, class_label="ECE-A")
    assert [r["roll_number"] for r in rows] == ["B001"]


def test_daily_counts(marked):
    days = report_service.daily_counts(START, END)
    assert days == [
        {"date": "2026-03-02", "present": 1, "absent": 1},
        {"date": "2026-03-03", "present": 2, "absent": 0},
        {"date": "2026-03-04", "present": 0, "absent": 1},
    ]


def test_resolve_range(ctx):
    start, end = report_service.resolve_range()
    assert start.day == 1
    assert end == date.today()

    with pytest.raises(ValidationError):
        report_service.resolve_range("2026-03-10", "2026-03-01")


def test_export_csv(marked):
    rows = report_service.attendance_summary(START, END)
    output, mimetype, name = report_service.export_summary(rows, "csv", START, END)

    df = pd.read_csv(output)
    assert mimetype == "text/csv"
    assert name == "attendance_2026-03-01_2026-03-31.csv"
    assert list(df["Roll Number"]) == ["A001", "A002", "B001"]
    assert list(df["Present"]) == [2, 1, 0]


def test_export_excel(marked):
    rows = report_service.attendance_summary(START, END)
    output, mimetype, name = report_service.export_summary(rows, "excel", START, END)

    df = pd.read_excel(BytesIO(output.read()))
    assert name.endswith(".xlsx")
    assert "Percentage" in df.columns
    assert len(df) == 3


def test_export_pdf(marked):
    rows = report_service.attendance_summary(START, END)
    output, mimetype, _ = report_service.export_summary(rows, "pdf", START, END)

    assert mimetype == "application/pdf"
    assert output.read(4) == b"%PDF"


def test_export_pdf_without_rows(ctx):
    output, _, _ = report_service.export_summary([], "pdf", START, END)
    assert output.read(4) == b"%PDF"


def test_export_rejects_unknown_format(ctx):
    with pytest.raises(ValidationError):
        report_service.export_summary([], "docx", START, END)


def test_roster_pdf(ctx):
    students = [make_student(roll_number="A001", name="Zoë Müller", class_label="CSE-A")]
    assert report_service.roster_pdf(students).read(4) == b"%PDF"
