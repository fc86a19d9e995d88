import pytest

from app import create_app
from config.config import TestingConfig
from extensions import db
from models import Student, User
from models.user import ADMIN, TEACHER
from services.errors import AuthProviderError
from utils.password_utils import hash_password

PASSWORD = "correct-horse"


class FakeAuthGateway:
    """Stands in for the identity provider."""

    def __init__(self):
        self.users = {}
        self.confirmed = []

    def get_user(self, access_token):
        return self.users.get(access_token)

    def verify_email(self, token_hash, verify_type="signup"):
        if token_hash == "bad-token":
            raise AuthProviderError("Confirmation rejected (status 403)")
        self.confirmed.append((token_hash, verify_type))
        return {"id": "confirmed"}


@pytest.fixture
def gateway():
    return FakeAuthGateway()


@pytest.fixture
def app(gateway):
    app = create_app(TestingConfig, auth_gateway=gateway)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Application context for tests that talk to models and services directly."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_student(roll_number="A001", name="Aarav Sharma", **extra):
    student = Student(name=name, roll_number=roll_number, **extra)
    db.session.add(student)
    db.session.commit()
    return student


def make_user(email="teacher@school.test", role=TEACHER, staff_id="TCH100", name="Test Teacher"):
    user = User(
        email=email,
        name=name,
        staff_id=staff_id,
        role=role,
        password=hash_password(PASSWORD),
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def student_id(app):
    with app.app_context():
        return make_student(register_number="REG001", class_label="CSE-A").id


@pytest.fixture
def teacher_email(app):
    with app.app_context():
        return make_user().email


@pytest.fixture
def admin_email(app):
    with app.app_context():
        return make_user(email="admin@school.test", role=ADMIN, staff_id="ADM100", name="Admin").email


def login(client, email):
    return client.post("/login", data={"email": email, "password": PASSWORD})


@pytest.fixture
def teacher_client(client, teacher_email):
    login(client, teacher_email)
    return client


@pytest.fixture
def admin_client(client, admin_email):
    login(client, admin_email)
    return client
