"""
TubeHub API - Like routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import LikeTarget, User
from tubehub.schemas.schemas import ToggleResult
from tubehub.services.social.like_service import like_service

router = APIRouter(prefix="/likes", tags=["Likes"], dependencies=[Depends(get_current_user)])


async def _toggle(db: AsyncSession, user: User, kind: LikeTarget, raw_id: str):
    liked = await like_service.toggle(db, user, kind, parse_id(raw_id, kind.value))
    noun = kind.value.capitalize()
    message = f"{noun} liked successfully." if liked else f"{noun} like removed successfully."
    return api_response(200, ToggleResult(active=liked), message)


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.VIDEO, video_id)


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.COMMENT, comment_id)


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _toggle(db, user, LikeTarget.TWEET, tweet_id)


@router.get("/videos")
async def liked_videos(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    videos = await like_service.liked_videos(db, user)
    return api_response(200, videos, "Liked videos fetched successfully.")
