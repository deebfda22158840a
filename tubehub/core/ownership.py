"""
Single ownership policy used by every mutable resource.

Existence is checked before ownership, so a missing resource answers 404
and someone else's resource answers 401.
"""
from __future__ import annotations

import uuid
from operator import attrgetter
from typing import Callable, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import NotFound, Unauthorized

T = TypeVar("T")

owner_id_of = attrgetter("owner_id")


async def get_or_404(db: AsyncSession, model: Type[T], resource_id: uuid.UUID, noun: str) -> T:
    resource = await db.get(model, resource_id)
    if resource is None:
        raise NotFound(f"No {noun} found.")
    return resource


def ensure_owner(
    resource,
    user,
    action: str,
    noun: str,
    owner_of: Callable[[object], uuid.UUID] = owner_id_of,
) -> None:
    if owner_of(resource) != user.id:
        raise Unauthorized(f"You cannot {action} this {noun}.")


async def load_owned(
    db: AsyncSession,
    model: Type[T],
    resource_id: uuid.UUID,
    user,
    action: str,
    noun: str,
    owner_of: Callable[[object], uuid.UUID] = owner_id_of,
) -> T:
    resource = await get_or_404(db, model, resource_id, noun)
    ensure_owner(resource, user, action, noun, owner_of)
    return resource
