"""
TubeHub Dashboard Service - aggregate stats across a channel's own videos.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.models.models import Like, LikeTarget, Subscription, User, Video
from tubehub.schemas.schemas import ChannelStats


class DashboardService:

    async def channel_stats(self, db: AsyncSession, user: User) -> ChannelStats:
        totals = (await db.execute(
            select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .where(Video.owner_id == user.id)
        )).one()

        total_likes = await db.scalar(
            select(func.count(Like.id))
            .select_from(Like)
            .join(Video, (Like.target_kind == LikeTarget.VIDEO) & (Like.target_id == Video.id))
            .where(Video.owner_id == user.id)
        ) or 0

        subscribers = await db.scalar(
            select(func.count(Subscription.id)).where(Subscription.channel_id == user.id)
        ) or 0

        return ChannelStats(
            total_videos=totals[0] or 0,
            total_views=int(totals[1] or 0),
            total_video_likes=total_likes,
            subscribers=subscribers,
        )


dashboard_service = DashboardService()
