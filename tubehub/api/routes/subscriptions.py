"""
TubeHub API - Subscription routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import User
from tubehub.schemas.schemas import ToggleResult
from tubehub.services.social.subscription_service import subscription_service

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"], dependencies=[Depends(get_current_user)])


@router.get("/c")
async def subscribed_channels(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Channels the caller follows."""
    channels = await subscription_service.subscribed_channels(db, user)
    return api_response(200, channels, "Subscribed channels fetched successfully.")


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscribed = await subscription_service.toggle(db, user, parse_id(channel_id, "channel"))
    message = "Channel subscribed." if subscribed else "Channel unsubscribed."
    return api_response(200, ToggleResult(active=subscribed), message)


@router.get("/u/subscribers")
async def channel_subscribers(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Accounts following the caller's channel."""
    subscribers = await subscription_service.subscribers_of(db, user)
    return api_response(200, subscribers, "Subscribers fetched successfully.")
