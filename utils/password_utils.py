import secrets

import bcrypt
from werkzeug.security import generate_password_hash, check_password_hash

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a werkzeug or legacy bcrypt hash."""
    if not password or not password_hash:
        return False

    if password_hash.startswith(BCRYPT_PREFIXES):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    return check_password_hash(password_hash, password)


def generate_password(length: int = 12) -> str:
    return secrets.token_urlsafe(length)[:length]
