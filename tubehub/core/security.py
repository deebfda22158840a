"""
TubeHub credential & token service.

Passwords are salted one-way hashes (werkzeug). Tokens are HS256 JWTs with
one secret per token class: access, refresh and email (verification and
password reset share the email secret but differ by ``purpose``).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from tubehub.core.config import get_settings

settings = get_settings()

PURPOSE_EMAIL_VERIFICATION = "email_verification"
PURPOSE_PASSWORD_RESET = "password_reset"


class InvalidTokenError(Exception):
    """Raised when a token cannot be trusted."""


class TokenExpiredError(InvalidTokenError):
    pass


class TokenMalformedError(InvalidTokenError):
    pass


class TokenClaimError(InvalidTokenError):
    pass


# ── Passwords ────────────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    return generate_password_hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    return check_password_hash(hashed, plain)


# ── Signing ──────────────────────────────────────────────────────────────

def _sign(claims: Dict[str, Any], secret: str, expires_in: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": now,
        "exp": now + expires_in,
        # two tokens minted in the same second must still differ
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def issue_access_token(user) -> str:
    return _sign(
        {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
        },
        settings.access_token_secret,
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def issue_refresh_token(user) -> str:
    return _sign(
        {"sub": str(user.id)},
        settings.refresh_token_secret,
        timedelta(days=settings.refresh_token_expire_days),
    )


def issue_email_token(user) -> str:
    return _sign(
        {"sub": str(user.id), "purpose": PURPOSE_EMAIL_VERIFICATION},
        settings.email_token_secret,
        timedelta(hours=settings.email_token_expire_hours),
    )


def issue_password_reset_token(user) -> str:
    return _sign(
        {"sub": str(user.id), "purpose": PURPOSE_PASSWORD_RESET},
        settings.email_token_secret,
        timedelta(minutes=settings.password_reset_token_expire_minutes),
    )


def verify_token(
    token: str,
    secret: str,
    required: Iterable[str] = ("sub",),
    purpose: Optional[str] = None,
) -> Dict[str, Any]:
    """Check signature and expiry, then required claims.

    Raises TokenExpiredError, TokenMalformedError (bad format or forged
    signature) or TokenClaimError (well formed but missing a claim).
    """
    try:
        claims = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token is expired.") from e
    except jwt.PyJWTError as e:
        raise TokenMalformedError("Token is invalid.") from e

    for claim in required:
        if not claims.get(claim):
            raise TokenClaimError(f"Token is missing the '{claim}' claim.")
    if purpose is not None and claims.get("purpose") != purpose:
        raise TokenClaimError("Token was issued for another purpose.")

    try:
        claims["sub"] = uuid.UUID(str(claims["sub"]))
    except (KeyError, ValueError) as e:
        raise TokenClaimError("Token subject is not a valid id.") from e
    return claims
