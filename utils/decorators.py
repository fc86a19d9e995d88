from functools import wraps

from flask import redirect, url_for, request, session, jsonify
from flask_login import current_user, login_user

from services.auth_service import user_for_token


def _wants_json():
    return request.path.startswith("/api/")


def _deny(status):
    if _wants_json():
        message = "Authentication required" if status == 401 else "Forbidden"
        return jsonify({"error": message}), status
    if status == 401:
        return redirect(url_for("auth.login"))
    return "Access Denied: You do not have the required role.", 403


def ensure_authenticated():
    """True when a local login exists or the stored provider token is still valid."""
    if current_user.is_authenticated:
        return True

    token = session.get("access_token")
    if not token:
        return False

    user = user_for_token(token)
    if not user:
        session.pop("access_token", None)
        return False

    login_user(user)
    return True


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not ensure_authenticated():
            return _deny(401)
        return func(*args, **kwargs)
    return wrapper


def role_required(required_role):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not ensure_authenticated():
                return _deny(401)

            if current_user.role != required_role:
                return _deny(403)

            return func(*args, **kwargs)
        return wrapper
    return decorator
