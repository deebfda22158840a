"""
Input validation helpers shared by the services.
"""
from __future__ import annotations

import re
import uuid
from typing import Optional

from tubehub.core.errors import BadRequest

EMAIL_RE = re.compile(r"^[\w-]+(\.[\w-]+)*@([\w-]+\.)+[a-zA-Z]{2,7}$")


def validate_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def parse_id(value: Optional[str], label: str) -> uuid.UUID:
    """Turn a path/query id into a UUID or fail with BadRequest."""
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError):
        raise BadRequest(f"Not a valid {label} id.")


def normalize_username(username: str) -> str:
    return username.strip().lower()


def normalize_email(email: str) -> str:
    return email.strip().lower()
