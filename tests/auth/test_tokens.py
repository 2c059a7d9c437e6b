from datetime import datetime, timedelta, timezone

import jwt
import pytest

from hrms.auth.model import CurrentUser
from hrms.auth.tokens import TokenCodec
from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError

SECRET = "test-secret-key-with-enough-length-for-hs256"
USER = CurrentUser(id=7, employee_id="EMP0007", role=Role.MANAGER, mobile="9000000007", email="m@example.com", department_id=3)


def test_round_trip_keeps_identity_claims():
    codec = TokenCodec(SECRET)
    assert codec.decode(codec.encode(USER)) == USER


def test_expired_token_is_rejected():
    codec = TokenCodec(SECRET, expires_hours=1)
    token = codec.encode(USER, now=datetime.now(timezone.utc) - timedelta(hours=2))
    with pytest.raises(AuthorizationError, match="Invalid or expired"):
        codec.decode(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenCodec("another-secret-key-with-enough-length-000").encode(USER)
    with pytest.raises(AuthorizationError):
        TokenCodec(SECRET).decode(token)


def test_token_with_unknown_role_is_rejected():
    token = jwt.encode({"id": 1, "employee_id": "X", "role": "intern"}, SECRET, algorithm="HS256")
    with pytest.raises(AuthorizationError):
        TokenCodec(SECRET).decode(token)


def test_secret_is_required():
    with pytest.raises(ValueError):
        TokenCodec("")
