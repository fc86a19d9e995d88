import logging

import requests
from flask import current_app

from extensions import db
from models.user import User, TEACHER
from services.errors import AuthProviderError, DuplicateRecordError
from services.persistence import commit
from utils.password_utils import verify_password

logger = logging.getLogger(__name__)


class AuthGateway:
    """Thin client for the external identity provider (GoTrue-style API).

    The application never validates provider tokens itself; it forwards
    them and trusts the answer.
    """

    def __init__(self, base_url, api_key, timeout=5.0, session=None):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.http = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            config.get("AUTH_PROVIDER_URL"),
            config.get("AUTH_PROVIDER_KEY"),
            timeout=config.get("AUTH_PROVIDER_TIMEOUT", 5.0),
        )

    @property
    def configured(self):
        return bool(self.base_url and self.api_key)

    def _headers(self, access_token=None):
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def get_user(self, access_token):
        """Return the provider's user payload for a token, or None if invalid."""
        if not access_token or not self.configured:
            return None

        try:
            resp = self.http.get(
                f"{self.base_url}/auth/v1/user",
                headers=self._headers(access_token),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Auth provider unreachable: %s", exc)
            return None

        if resp.status_code != 200:
            logger.info("Auth provider rejected token (status %s)", resp.status_code)
            return None
        return resp.json()

    def verify_email(self, token_hash, verify_type="signup"):
        """Confirm an email-confirmation token. Raises AuthProviderError on failure."""
        if not self.configured:
            raise AuthProviderError("Auth provider is not configured")

        try:
            resp = self.http.post(
                f"{self.base_url}/auth/v1/verify",
                headers=self._headers(),
                json={"token_hash": token_hash, "type": verify_type},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthProviderError(f"Auth provider unreachable: {exc}") from exc

        if resp.status_code != 200:
            raise AuthProviderError(f"Confirmation rejected (status {resp.status_code})")
        return resp.json()


def init_auth_gateway(app, gateway=None):
    app.extensions["auth_gateway"] = gateway or AuthGateway.from_config(app.config)


def get_auth_gateway():
    return current_app.extensions["auth_gateway"]


# =========================================================
# LOCAL USER RESOLUTION
# =========================================================

def authenticate_user(email: str, password: str):
    """Legacy local password login."""
    user = User.query.filter_by(email=(email or "").strip().lower()).first()

    if not user:
        return None

    if not verify_password(password, user.password):
        return None

    return user


def user_for_provider_identity(identity):
    """Map a provider user payload onto a local User, registering it on first sight."""
    auth_user_id = identity.get("id")
    email = (identity.get("email") or "").strip().lower()
    if not auth_user_id or not email:
        return None

    user = User.query.filter_by(auth_user_id=auth_user_id).first()
    if user:
        return user

    user = User.query.filter_by(email=email).first()
    if user:
        user.auth_user_id = auth_user_id
    else:
        metadata = identity.get("user_metadata") or {}
        staff_id = str(metadata.get("staff_id") or "").strip() or None
        if staff_id and User.query.filter_by(staff_id=staff_id).first():
            logger.warning("Staff id %s already taken; registering %s without it", staff_id, email)
            staff_id = None
        user = User(
            email=email,
            name=metadata.get("name") or email.split("@")[0],
            staff_id=staff_id,
            role=TEACHER,
            auth_user_id=auth_user_id,
        )
        db.session.add(user)
        logger.info("Registered provider user %s as teacher", email)

    commit("A user with this email, staff id or provider id already exists")
    return user


def user_for_token(access_token):
    identity = get_auth_gateway().get_user(access_token)
    if not identity:
        return None
    try:
        return user_for_provider_identity(identity)
    except DuplicateRecordError as exc:
        logger.warning("Could not register provider user %s: %s", identity.get("email"), exc.message)
        return None
