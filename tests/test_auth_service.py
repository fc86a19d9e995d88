from unittest.mock import Mock

import bcrypt
import pytest
import requests

from conftest import make_user, PASSWORD
from services.auth_service import AuthGateway, authenticate_user
from services.errors import AuthProviderError
from utils.password_utils import hash_password, verify_password


def response(status, payload=None):
    resp = Mock(status_code=status)
    resp.json.return_value = payload or {}
    return resp


def gateway_with(http):
    return AuthGateway("https://auth.example.test/", "anon-key", timeout=2, session=http)


def test_get_user_forwards_bearer_token():
    http = Mock()
    http.get.return_value = response(200, {"id": "u1", "email": "a@b.test"})

    user = gateway_with(http).get_user("tok")

    assert user["id"] == "u1"
    url = http.get.call_args.args[0]
    headers = http.get.call_args.kwargs["headers"]
    assert url == "https://auth.example.test/auth/v1/user"
    assert headers["Authorization"] == "Bearer tok"
    assert headers["apikey"] == "anon-key"
    assert http.get.call_args.kwargs["timeout"] == 2


def test_get_user_rejected_or_unreachable():
    http = Mock()
    http.get.return_value = response(401)
    assert gateway_with(http).get_user("tok") is None

    http.get.side_effect = requests.ConnectionError("down")
    assert gateway_with(http).get_user("tok") is None

    assert gateway_with(http).get_user("") is None


def test_unconfigured_gateway_never_authenticates():
    http = Mock()
    gateway = AuthGateway("", "", session=http)

    assert gateway.get_user("tok") is None
    http.get.assert_not_called()
    with pytest.raises(AuthProviderError):
        gateway.verify_email("hash")


def test_verify_email():
    http = Mock()
    http.post.return_value = response(200, {"user": {"id": "u1"}})

    gateway_with(http).verify_email("hash-1")

    assert http.post.call_args.kwargs["json"] == {"token_hash": "hash-1", "type": "signup"}

    http.post.return_value = response(403)
    with pytest.raises(AuthProviderError):
        gateway_with(http).verify_email("hash-1")


def test_password_hashes():
    assert verify_password("secret", hash_password("secret"))
    assert not verify_password("wrong", hash_password("secret"))

    legacy = bcrypt.hashpw(b"secret", bcrypt.gensalt()).decode()
    assert verify_password("secret", legacy)
    assert not verify_password("wrong", legacy)

    assert not verify_password("secret", None)
    assert not verify_password("", legacy)


def test_authenticate_user(ctx):
    make_user(email="teacher@school.test")

    assert authenticate_user("Teacher@School.test", PASSWORD).email == "teacher@school.test"
    assert authenticate_user("teacher@school.test", "wrong") is None
    assert authenticate_user("nobody@school.test", PASSWORD) is None
