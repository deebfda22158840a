import uuid
from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from tubehub.core.config import get_settings
from tubehub.core.errors import BadRequest
from tubehub.core.security import (
    PURPOSE_EMAIL_VERIFICATION,
    TokenClaimError,
    TokenExpiredError,
    TokenMalformedError,
    _sign,
    hash_password,
    issue_access_token,
    issue_email_token,
    issue_refresh_token,
    verify_password,
    verify_token,
)
from tubehub.core.validation import parse_id, validate_email

settings = get_settings()


@pytest.fixture
def user():
    return SimpleNamespace(id=uuid.uuid4(), email="ana@x.com", username="ana", full_name="Ana")


def test_password_hash_round_trip():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("", hashed)


def test_access_token_claims(user):
    claims = verify_token(issue_access_token(user), settings.access_token_secret)
    assert claims["sub"] == user.id
    assert claims["username"] == "ana"
    assert claims["email"] == "ana@x.com"
    assert claims["full_name"] == "Ana"


def test_tokens_minted_together_differ(user):
    assert issue_refresh_token(user) != issue_refresh_token(user)


def test_wrong_secret_is_malformed(user):
    with pytest.raises(TokenMalformedError):
        verify_token(issue_refresh_token(user), settings.access_token_secret)


def test_garbage_is_malformed():
    with pytest.raises(TokenMalformedError):
        verify_token("not-a-token", settings.access_token_secret)


def test_expired_token(user):
    token = _sign({"sub": str(user.id)}, settings.access_token_secret, timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        verify_token(token, settings.access_token_secret)


def test_missing_claim():
    token = jwt.encode({"email": "ana@x.com"}, settings.access_token_secret, algorithm="HS256")
    with pytest.raises(TokenClaimError):
        verify_token(token, settings.access_token_secret)


def test_purpose_is_checked(user):
    token = issue_email_token(user)
    claims = verify_token(token, settings.email_token_secret, purpose=PURPOSE_EMAIL_VERIFICATION)
    assert claims["sub"] == user.id
    with pytest.raises(TokenClaimError):
        verify_token(token, settings.email_token_secret, purpose="password_reset")


@pytest.mark.parametrize("email, ok", [
    ("ana@x.com", True),
    ("first.last@mail.example.org", True),
    ("ana@x", False),
    ("@x.com", False),
    ("", False),
    (None, False),
])
def test_validate_email(email, ok):
    assert validate_email(email) is ok


def test_parse_id():
    value = uuid.uuid4()
    assert parse_id(str(value), "video") == value
    with pytest.raises(BadRequest) as exc:
        parse_id("123", "video")
    assert exc.value.message == "Not a valid video id."
    assert exc.value.status_code == 400
