"""
TubeHub Subscription Service - subscriber -> channel edges.

An edge exists exactly while the subscriber follows the channel; the only
write operation is a toggle.
"""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import BadRequest
from tubehub.core.ownership import get_or_404
from tubehub.models.models import Subscription, User
from tubehub.schemas.schemas import AssetSchema, ChannelSummary, OwnerSchema


class SubscriptionService:

    async def toggle(self, db: AsyncSession, subscriber: User, channel_id: uuid.UUID) -> bool:
        """Returns True when the call subscribed, False when it unsubscribed."""
        channel = await get_or_404(db, User, channel_id, "channel")
        if channel.id == subscriber.id:
            raise BadRequest("You cannot subscribe to your own channel.")

        edge = await db.scalar(
            select(Subscription).where(
                Subscription.subscriber_id == subscriber.id,
                Subscription.channel_id == channel.id,
            )
        )
        if edge is None:
            db.add(Subscription(subscriber_id=subscriber.id, channel_id=channel.id))
            await db.flush()
            return True

        await db.delete(edge)
        await db.flush()
        return False

    async def subscribers_of(self, db: AsyncSession, channel: User) -> List[OwnerSchema]:
        result = await db.execute(
            select(User)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .where(Subscription.channel_id == channel.id)
            .order_by(Subscription.created_at.desc())
        )
        return [OwnerSchema.from_model(u) for u in result.scalars().all()]

    async def subscribed_channels(self, db: AsyncSession, subscriber: User) -> List[ChannelSummary]:
        result = await db.execute(
            select(User)
            .join(Subscription, Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == subscriber.id)
            .order_by(Subscription.created_at.desc())
        )
        channels = []
        for u in result.scalars().all():
            cover = None
            if u.cover_image_url:
                cover = AssetSchema(url=u.cover_image_url, public_id=u.cover_image_public_id or "")
            channels.append(ChannelSummary(
                id=str(u.id),
                username=u.username,
                full_name=u.full_name,
                avatar=AssetSchema(url=u.avatar_url, public_id=u.avatar_public_id),
                cover_image=cover,
            ))
        return channels


subscription_service = SubscriptionService()
