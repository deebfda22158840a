"""
TubeHub Like Service - account -> content edges.

A like targets exactly one item, addressed as ``(LikeTarget, id)``.
"""
from __future__ import annotations

import uuid
from typing import Dict, List, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import NotFound
from tubehub.core.ownership import get_or_404
from tubehub.models.models import Comment, Like, LikeTarget, Tweet, User, Video
from tubehub.schemas.schemas import VideoWithOwner

TARGET_MODELS: Dict[LikeTarget, Type] = {
    LikeTarget.VIDEO: Video,
    LikeTarget.COMMENT: Comment,
    LikeTarget.TWEET: Tweet,
}


class LikeService:

    async def toggle(self, db: AsyncSession, user: User, kind: LikeTarget, target_id: uuid.UUID) -> bool:
        """Returns True when the call liked, False when it removed the like."""
        target = await get_or_404(db, TARGET_MODELS[kind], target_id, kind.value)

        edge = await db.scalar(
            select(Like).where(
                Like.liked_by_id == user.id,
                Like.target_kind == kind,
                Like.target_id == target.id,
            )
        )
        if edge is None:
            db.add(Like(liked_by_id=user.id, target_kind=kind, target_id=target.id))
            await db.flush()
            return True

        await db.delete(edge)
        await db.flush()
        return False

    async def liked_videos(self, db: AsyncSession, user: User) -> List[VideoWithOwner]:
        result = await db.execute(
            select(Video, User)
            .select_from(Like)
            .join(Video, (Like.target_kind == LikeTarget.VIDEO) & (Like.target_id == Video.id))
            .join(User, User.id == Video.owner_id)
            .where(Like.liked_by_id == user.id)
            .order_by(Like.created_at.desc())
        )
        videos = [VideoWithOwner.from_row(video, owner) for video, owner in result.all()]
        if not videos:
            raise NotFound("No video found.")
        return videos


like_service = LikeService()
