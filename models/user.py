from flask_login import UserMixin
from sqlalchemy.orm import validates

from extensions import db
from services.errors import ValidationError

ADMIN = "admin"
TEACHER = "teacher"
ROLES = (ADMIN, TEACHER)


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.String(30), unique=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)

    # Only set for accounts using the legacy local password login
    password = db.Column(db.String(255))

    role = db.Column(
        db.Enum(*ROLES, name="user_role", create_constraint=True),
        nullable=False,
        default=TEACHER,
        server_default=TEACHER
    )

    # Identity provider's user id, filled in on first token login
    auth_user_id = db.Column(db.String(64), unique=True)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now()
    )

    @validates("role")
    def validate_role(self, key, value):
        if value not in ROLES:
            raise ValidationError(f"Invalid role '{value}'. Expected one of: {', '.join(ROLES)}")
        return value

    @validates("email")
    def validate_email(self, key, value):
        value = (value or "").strip().lower()
        if not value:
            raise ValidationError("email is required")
        return value

    @property
    def is_admin(self):
        return self.role == ADMIN

    def to_dict(self):
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }

    def __repr__(self):
        return f"<User {self.email}>"
