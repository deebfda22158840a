"""
TubeHub Comment Service.
"""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.ownership import get_or_404, load_owned
from tubehub.models.models import Comment, Like, LikeTarget, User, Video
from tubehub.schemas.schemas import CommentWithOwner, OwnerSchema


class CommentService:

    async def list_for_video(
        self, db: AsyncSession, video_id: uuid.UUID, offset: int, limit: int
    ) -> List[CommentWithOwner]:
        await get_or_404(db, Video, video_id, "video")

        result = await db.execute(
            select(Comment, User)
            .join(User, User.id == Comment.owner_id)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
            .offset(offset)
            .limit(limit)
        )
        return [
            CommentWithOwner(
                id=str(comment.id),
                content=comment.content,
                owner=OwnerSchema.from_model(owner),
                created_at=comment.created_at,
                updated_at=comment.updated_at,
            )
            for comment, owner in result.all()
        ]

    async def add(self, db: AsyncSession, video_id: uuid.UUID, user: User, content: str) -> Comment:
        video = await get_or_404(db, Video, video_id, "video")
        comment = Comment(owner_id=user.id, video_id=video.id, content=content.strip())
        db.add(comment)
        await db.flush()
        return comment

    async def update(self, db: AsyncSession, comment_id: uuid.UUID, user: User, content: str) -> Comment:
        comment = await load_owned(db, Comment, comment_id, user, "update", "comment")
        comment.content = content.strip()
        await db.flush()
        return comment

    async def delete(self, db: AsyncSession, comment_id: uuid.UUID, user: User) -> None:
        comment = await load_owned(db, Comment, comment_id, user, "delete", "comment")
        await db.execute(
            delete(Like).where(Like.target_kind == LikeTarget.COMMENT, Like.target_id == comment.id)
        )
        await db.delete(comment)
        await db.flush()


comment_service = CommentService()
