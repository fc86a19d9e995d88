from sqlalchemy.exc import IntegrityError

from extensions import db
from services.errors import DuplicateRecordError, ValidationError

# Fragments drivers put in unique-violation messages (sqlite, postgres, mysql)
_UNIQUE_MARKERS = ("unique", "duplicate")


def is_unique_violation(exc):
    message = str(getattr(exc, "orig", exc)).lower()
    return any(marker in message for marker in _UNIQUE_MARKERS)


def commit(duplicate_message="Record already exists"):
    """Commit the session, turning constraint failures into domain errors."""
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if is_unique_violation(exc):
            raise DuplicateRecordError(duplicate_message) from exc
        raise ValidationError("Missing required field or invalid reference") from exc
