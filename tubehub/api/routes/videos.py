"""
TubeHub API - Video routes.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import PageParams, SortParams, get_current_user, page_params, sort_params
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import User
from tubehub.schemas.schemas import UpdateVideoRequest, VideoSchema
from tubehub.services.content.video_service import video_service

router = APIRouter(prefix="/videos", tags=["Videos"], dependencies=[Depends(get_current_user)])


@router.get("/")
async def list_videos(
    query: Optional[str] = None,
    user_id: Optional[str] = Query(None, alias="userId"),
    page: PageParams = Depends(page_params),
    sort: SortParams = Depends(sort_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Paginated, searchable feed of published videos (plus the caller's own drafts)."""
    owner_id = parse_id(user_id, "user") if user_id else None
    videos = await video_service.list_videos(
        db,
        viewer=user,
        offset=page.offset,
        limit=page.limit,
        sort_by=sort.sort_by,
        descending=sort.descending,
        query=query,
        owner_id=owner_id,
    )
    return api_response(200, videos, "Videos fetched successfully.")


@router.post("/")
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.publish(db, user, title, description, video_file, thumbnail)
    return api_response(201, VideoSchema.from_model(video), "Video uploaded successfully.")


@router.get("/{video_id}")
async def get_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.get_video(db, parse_id(video_id, "video"), user)
    return api_response(200, video, "Video fetched successfully.")


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    payload: UpdateVideoRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.update_details(
        db, parse_id(video_id, "video"), user, payload.title, payload.description
    )
    return api_response(200, VideoSchema.from_model(video), "Video updated successfully.")


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await video_service.delete_video(db, parse_id(video_id, "video"), user)
    return api_response(200, message="Video deleted successfully.")


@router.patch("/thumbnail/{video_id}")
async def update_thumbnail(
    video_id: str,
    thumbnail: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.replace_thumbnail(db, parse_id(video_id, "video"), user, thumbnail)
    return api_response(200, VideoSchema.from_model(video), "Video updated successfully.")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish(
    video_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await video_service.toggle_publish(db, parse_id(video_id, "video"), user)
    state = "published" if video.is_published else "unpublished"
    return api_response(200, VideoSchema.from_model(video), f"Video {state}.")
