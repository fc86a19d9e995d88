import logging
from datetime import date, datetime
from io import BytesIO

import pandas as pd
from fpdf import FPDF
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from sqlalchemy import case, func

from extensions import db
from models.attendance import Attendance, PRESENT, ABSENT
from models.student import Student
from services.attendance_service import parse_date
from services.errors import ValidationError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "excel", "pdf")

SUMMARY_HEADERS = {
    "roll_number": "Roll Number",
    "register_number": "Register Number",
    "name": "Student Name",
    "class_label": "Class",
    "present": "Present",
    "absent": "Absent",
    "total": "Total",
    "percentage": "Percentage",
}


def resolve_range(start=None, end=None):
    """Default to the current month up to today."""
    today = date.today()
    start = parse_date(start, "start") if start else today.replace(day=1)
    end = parse_date(end, "end") if end else today
    if start > end:
        raise ValidationError("start must not be after end")
    return start, end


def _count(status):
    return func.coalesce(func.sum(case((Attendance.status == status, 1), else_=0)), 0)


def attendance_summary(start, end, class_label=None):
    present = _count(PRESENT).label("present")
    absent = _count(ABSENT).label("absent")

    query = (
        db.session.query(Student, present, absent)
        .outerjoin(
            Attendance,
            db.and_(
                Attendance.student_id == Student.id,
                Attendance.date.between(start, end),
            ),
        )
        .group_by(Student.id)
    )
    if class_label:
        query = query.filter(Student.class_label == class_label)

    rows = []
    for student, n_present, n_absent in query.order_by(Student.roll_number.asc()).all():
        n_present, n_absent = int(n_present), int(n_absent)
        total = n_present + n_absent
        rows.append({
            "student_id": student.id,
            "roll_number": student.roll_number,
            "register_number": student.register_number,
            "name": student.name,
            "class_label": student.class_label,
            "present": n_present,
            "absent": n_absent,
            "total": total,
            "percentage": round(n_present / total * 100, 2) if total else 0,
        })
    return rows


def daily_counts(start, end):
    query = (
        db.session.query(Attendance.date, _count(PRESENT), _count(ABSENT))
        .filter(Attendance.date.between(start, end))
        .group_by(Attendance.date)
        .order_by(Attendance.date.asc())
    )
    return [
        {"date": day.isoformat(), "present": int(p), "absent": int(a)}
        for day, p, a in query.all()
    ]


def summary_dataframe(rows):
    df = pd.DataFrame(rows, columns=["student_id", *SUMMARY_HEADERS])
    return df.drop(columns=["student_id"]).rename(columns=SUMMARY_HEADERS)


# =========================================================
# EXPORTS
# =========================================================

def export_summary(rows, file_format, start, end):
    """Return (buffer, mimetype, download_name) for the summary in the given format."""
    if file_format not in EXPORT_FORMATS:
        raise ValidationError(f"Unsupported format '{file_format}'")

    df = summary_dataframe(rows)
    stem = f"attendance_{start.isoformat()}_{end.isoformat()}"
    output = BytesIO()

    if file_format == "excel":
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        download_name = f"{stem}.xlsx"
    elif file_format == "pdf":
        _summary_pdf(output, df, start, end)
        mimetype = "application/pdf"
        download_name = f"{stem}.pdf"
    else:
        output.write(df.to_csv(index=False).encode("utf-8"))
        mimetype = "text/csv"
        download_name = f"{stem}.csv"

    output.seek(0)
    logger.info("Exported attendance summary as %s (%d rows)", file_format, len(rows))
    return output, mimetype, download_name


def _summary_pdf(buffer, df, start, end):
    doc = SimpleDocTemplate(buffer, pagesize=A4, leftMargin=24, rightMargin=24, topMargin=24, bottomMargin=24)
    styles = getSampleStyleSheet()
    now_text = datetime.now().strftime("%Y-%m-%d %H:%M")

    elements = [
        Paragraph("Attendance Report", styles["Title"]),
        Paragraph(f"Period: {start.isoformat()} to {end.isoformat()} | Generated: {now_text}", styles["Normal"]),
        Spacer(1, 12),
    ]

    table_data = [list(df.columns)]
    for record in df.itertuples(index=False):
        table_data.append(["" if pd.isna(v) else str(v) for v in record])
    if len(table_data) == 1:
        table_data.append(["--", "--", "No data"] + ["--"] * (len(df.columns) - 3))

    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (4, 1), (-1, -1), "CENTER"),
    ]))
    elements.append(table)
    doc.build(elements)


def _latin1(value):
    # Core PDF fonts only cover latin-1
    return str(value).encode("latin-1", "replace").decode("latin-1")


def roster_pdf(students):
    """Printable student roster for admins."""
    pdf = FPDF()
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 10, "STUDENT ROSTER", align="C", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(5)

    columns = [("Roll No", 25), ("Register No", 35), ("Name", 60), ("Class", 30), ("Branch", 40)]

    pdf.set_font("Helvetica", "B", 10)
    for title, width in columns:
        pdf.cell(width, 8, title, border=1, align="C")
    pdf.ln()

    pdf.set_font("Helvetica", size=9)
    for s in students:
        values = [s.roll_number, s.register_number, s.name, s.class_label, s.branch]
        for (_, width), value in zip(columns, values):
            pdf.cell(width, 8, _latin1(value or ""), border=1)
        pdf.ln()

    return BytesIO(bytes(pdf.output()))
