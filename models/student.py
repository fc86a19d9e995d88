from sqlalchemy.orm import validates

from extensions import db
from services.errors import ValidationError


class Student(db.Model):
    __tablename__ = "students"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    roll_number = db.Column(db.String(30), unique=True, nullable=False)
    register_number = db.Column(db.String(30))
    admission_year = db.Column(db.String(9))
    course_type = db.Column(db.String(30))
    course = db.Column(db.String(100))
    branch = db.Column(db.String(100))
    academic_year = db.Column(db.String(9))
    verification = db.Column(db.String(30))
    class_label = db.Column(db.String(30))

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    attendance_records = db.relationship(
        "Attendance",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy=True,
        order_by="Attendance.date"
    )

    EDITABLE_FIELDS = (
        "name", "roll_number", "register_number", "admission_year",
        "course_type", "course", "branch", "academic_year",
        "verification", "class_label",
    )

    @validates("name", "roll_number")
    def validate_required(self, key, value):
        value = str(value).strip() if value is not None else ""
        if not value:
            raise ValidationError(f"{key} is required")
        return value

    def to_dict(self):
        data = {"id": self.id}
        for field in self.EDITABLE_FIELDS:
            data[field] = getattr(self, field)
        return data

    def __repr__(self):
        return f"<Student {self.roll_number}>"
