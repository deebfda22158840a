"""
TubeHub API - Comment routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import PageParams, get_current_user, page_params
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import User
from tubehub.schemas.schemas import CommentSchema, ContentRequest
from tubehub.services.content.comment_service import comment_service

router = APIRouter(prefix="/comments", tags=["Comments"], dependencies=[Depends(get_current_user)])


@router.get("/{video_id}")
async def list_video_comments(
    video_id: str,
    page: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, owners inlined."""
    comments = await comment_service.list_for_video(
        db, parse_id(video_id, "video"), offset=page.offset, limit=page.limit
    )
    return api_response(200, comments, "Comments fetched successfully.")


@router.post("/{video_id}")
async def add_comment(
    video_id: str,
    payload: ContentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.add(db, parse_id(video_id, "video"), user, payload.content)
    return api_response(201, CommentSchema.from_model(comment), "Comment added successfully.")


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str,
    payload: ContentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await comment_service.update(db, parse_id(comment_id, "comment"), user, payload.content)
    return api_response(200, CommentSchema.from_model(comment), "Comment updated successfully.")


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await comment_service.delete(db, parse_id(comment_id, "comment"), user)
    return api_response(200, message="Comment deleted.")
