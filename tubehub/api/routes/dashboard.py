"""
TubeHub API - Channel dashboard routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.models.models import User
from tubehub.schemas.schemas import VideoSchema
from tubehub.services.content.video_service import video_service
from tubehub.services.dashboard.dashboard_service import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/stats")
async def channel_stats(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Totals across the caller's own videos plus subscriber count."""
    stats = await dashboard_service.channel_stats(db, user)
    return api_response(200, stats, "Channel stats fetched successfully.")


@router.get("/videos")
async def channel_videos(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    videos = await video_service.channel_videos(db, user)
    return api_response(200, [VideoSchema.from_model(v) for v in videos], "Videos fetched successfully.")
