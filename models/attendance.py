from sqlalchemy.orm import validates

from extensions import db
from services.errors import ValidationError

PRESENT = "Present"
ABSENT = "Absent"
ATTENDANCE_STATUSES = (PRESENT, ABSENT)


class Attendance(db.Model):
    __tablename__ = "attendances"

    id = db.Column(db.Integer, primary_key=True)

    # Copied from the student when the mark is written
    student_name = db.Column(db.String(100), nullable=False)
    register_number = db.Column(db.String(30), nullable=False)

    date = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.Enum(*ATTENDANCE_STATUSES, name="attendance_status", create_constraint=True),
        nullable=False
    )

    student_id = db.Column(
        db.Integer,
        db.ForeignKey("students.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False
    )

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    student = db.relationship("Student", back_populates="attendance_records")

    __table_args__ = (
        db.UniqueConstraint("student_id", "date", name="unique_student_date"),
    )

    @validates("status")
    def validate_status(self, key, value):
        if value not in ATTENDANCE_STATUSES:
            raise ValidationError(
                f"Invalid status '{value}'. Expected one of: {', '.join(ATTENDANCE_STATUSES)}"
            )
        return value

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "register_number": self.register_number,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status,
        }

    def __repr__(self):
        return f"<Attendance student={self.student_id} {self.date} {self.status}>"
