"""
TubeHub API dependencies - the authorization guard and list parameters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.config import get_settings
from tubehub.core.database import get_db
from tubehub.core.errors import BadRequest, Unauthorized
from tubehub.core.responses import ACCESS_COOKIE
from tubehub.core.security import InvalidTokenError, verify_token
from tubehub.models.models import User

logger = logging.getLogger(__name__)
settings = get_settings()


def extract_access_token(request: Request) -> Optional[str]:
    """Cookie first, then ``Authorization: Bearer``."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    token = extract_access_token(request)
    if not token:
        raise Unauthorized("Unauthorized request.")

    try:
        claims = verify_token(token, settings.access_token_secret)
    except InvalidTokenError as e:
        logger.debug(f"Rejected access token on {request.url.path}: {e}")
        raise Unauthorized(str(e) or "Invalid access token.")

    user = await db.get(User, claims["sub"])
    if user is None:
        raise Unauthorized("Invalid access token.")

    request.state.user = user
    return user


# ── Lists ────────────────────────────────────────────────────────────────

@dataclass
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)


@dataclass
class SortParams:
    sort_by: str
    descending: bool


def sort_params(
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_type: str = Query("-1", alias="sortType"),
) -> SortParams:
    direction = sort_type.strip().lower()
    if direction in ("-1", "desc", "descending"):
        return SortParams(sort_by=sort_by, descending=True)
    if direction in ("1", "asc", "ascending"):
        return SortParams(sort_by=sort_by, descending=False)
    raise BadRequest("sortType must be one of 1, -1, asc, desc.")
