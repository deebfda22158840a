"""
TubeHub Tweet Service - short text posts on a channel.
"""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import NotFound
from tubehub.core.ownership import get_or_404, load_owned
from tubehub.models.models import Like, LikeTarget, Tweet, User
from tubehub.schemas.schemas import OwnerSchema, TweetWithOwner


class TweetService:

    async def create(self, db: AsyncSession, user: User, content: str) -> Tweet:
        tweet = Tweet(owner_id=user.id, content=content.strip())
        db.add(tweet)
        await db.flush()
        return tweet

    async def list_for_user(self, db: AsyncSession, user_id: uuid.UUID) -> List[TweetWithOwner]:
        owner = await get_or_404(db, User, user_id, "user")

        result = await db.execute(
            select(Tweet)
            .where(Tweet.owner_id == owner.id)
            .order_by(Tweet.created_at.desc(), Tweet.id)
        )
        tweets = result.scalars().all()
        if not tweets:
            raise NotFound("No tweets found.")

        owner_schema = OwnerSchema.from_model(owner)
        return [
            TweetWithOwner(
                id=str(t.id),
                content=t.content,
                owner=owner_schema,
                created_at=t.created_at,
                updated_at=t.updated_at,
            )
            for t in tweets
        ]

    async def update(self, db: AsyncSession, tweet_id: uuid.UUID, user: User, content: str) -> Tweet:
        tweet = await load_owned(db, Tweet, tweet_id, user, "update", "tweet")
        tweet.content = content.strip()
        await db.flush()
        return tweet

    async def delete(self, db: AsyncSession, tweet_id: uuid.UUID, user: User) -> None:
        tweet = await load_owned(db, Tweet, tweet_id, user, "delete", "tweet")
        await db.execute(
            delete(Like).where(Like.target_kind == LikeTarget.TWEET, Like.target_id == tweet.id)
        )
        await db.delete(tweet)
        await db.flush()


tweet_service = TweetService()
