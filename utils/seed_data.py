import logging
from dataclasses import dataclass, field

from extensions import db
from models.student import Student
from models.user import User, ADMIN, TEACHER
from utils.password_utils import hash_password, generate_password

logger = logging.getLogger(__name__)


SAMPLE_STUDENTS = [
    {"name": "Aarav Sharma", "roll_number": "A001", "register_number": "REG2024001",
     "admission_year": "2024", "course_type": "UG", "course": "B.Tech",
     "branch": "Computer Science", "academic_year": "2024-2025",
     "verification": "Verified", "class_label": "CSE-A"},
    {"name": "Diya Patel", "roll_number": "A002", "register_number": "REG2024002",
     "admission_year": "2024", "course_type": "UG", "course": "B.Tech",
     "branch": "Computer Science", "academic_year": "2024-2025",
     "verification": "Verified", "class_label": "CSE-A"},
    {"name": "Kabir Nair", "roll_number": "A003", "register_number": "REG2024003",
     "admission_year": "2024", "course_type": "UG", "course": "B.Tech",
     "branch": "Computer Science", "academic_year": "2024-2025",
     "verification": "Pending", "class_label": "CSE-A"},
    {"name": "Meera Iyer", "roll_number": "B001", "register_number": "REG2024004",
     "admission_year": "2024", "course_type": "UG", "course": "B.Tech",
     "branch": "Electronics", "academic_year": "2024-2025",
     "verification": "Verified", "class_label": "ECE-A"},
    {"name": "Rohan Gupta", "roll_number": "B002", "register_number": "REG2024005",
     "admission_year": "2024", "course_type": "UG", "course": "B.Tech",
     "branch": "Electronics", "academic_year": "2024-2025",
     "verification": "Pending", "class_label": "ECE-A"},
]

SAMPLE_USERS = [
    {"staff_id": "ADM001", "name": "System Administrator",
     "email": "admin@school.test", "role": ADMIN},
    {"staff_id": "TCH001", "name": "Priya Menon",
     "email": "priya.menon@school.test", "role": TEACHER},
    {"staff_id": "TCH002", "name": "Arjun Rao",
     "email": "arjun.rao@school.test", "role": TEACHER},
]


@dataclass
class SeedResult:
    students_created: int = 0
    users_created: int = 0
    # email -> plain password, only for passwords generated during this run
    generated_credentials: dict = field(default_factory=dict)


def seed_students(result):
    # Table-level check: any existing row means the roster is already set up
    if Student.query.count() > 0:
        logger.info("Students table not empty, skipping student seed")
        return

    for s in SAMPLE_STUDENTS:
        db.session.add(Student(**s))

    db.session.commit()
    result.students_created = len(SAMPLE_STUDENTS)
    logger.info("Seeded %d students", result.students_created)


def seed_users(result, password=None):
    if User.query.count() > 0:
        logger.info("Users table not empty, skipping user seed")
        return

    for u in SAMPLE_USERS:
        plain = password or generate_password()
        if not password:
            result.generated_credentials[u["email"]] = plain

        # Hashed per user, so no two seeded accounts share a hash
        db.session.add(User(password=hash_password(plain), **u))

    db.session.commit()
    result.users_created = len(SAMPLE_USERS)
    logger.info("Seeded %d users", result.users_created)


def run_seed(password=None):
    result = SeedResult()
    try:
        seed_students(result)
        seed_users(result, password=password)
    except Exception:
        db.session.rollback()
        raise
    return result
