"""
TubeHub Video Service - publishing, listing, watching and removal of videos.
"""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import BadRequest, InternalError, NotFound
from tubehub.core.ownership import load_owned
from tubehub.models.models import (
    AssetKind, Comment, Like, LikeTarget, PlaylistVideo, User, Video, WatchHistoryEntry, utcnow,
)
from tubehub.schemas.schemas import VideoWithOwner
from tubehub.services.media.storage_service import discard_temp, spool_uploads, storage_service
from tubehub.workers import tasks

logger = logging.getLogger(__name__)

VIDEO_FOLDER = "videos/files"
THUMBNAIL_FOLDER = "videos/thumbnails"

SORTABLE_COLUMNS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}


class VideoService:

    async def publish(
        self,
        db: AsyncSession,
        user: User,
        title: str,
        description: str,
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
    ) -> Video:
        if not (title and title.strip() and description and description.strip()):
            raise BadRequest("All fields are required.")
        if video_file is None or not video_file.filename or thumbnail is None or not thumbnail.filename:
            raise BadRequest("Video file and thumbnail are required.")

        video_path, thumbnail_path = await spool_uploads(video_file, thumbnail)

        stored_video = await storage_service.upload(video_path, VIDEO_FOLDER, AssetKind.VIDEO)
        if stored_video is None:
            discard_temp(thumbnail_path)
            raise InternalError("Error uploading video and thumbnail.")

        stored_thumbnail = await storage_service.upload(thumbnail_path, THUMBNAIL_FOLDER)
        if stored_thumbnail is None:
            # do not orphan the video that made it
            tasks.remove_asset(stored_video.public_id, AssetKind.VIDEO)
            raise InternalError("Error uploading video and thumbnail.")

        video = Video(
            title=title.strip(),
            description=description.strip(),
            video_file_url=stored_video.url,
            video_file_public_id=stored_video.public_id,
            thumbnail_url=stored_thumbnail.url,
            thumbnail_public_id=stored_thumbnail.public_id,
            duration=stored_video.duration,
            owner_id=user.id,
        )
        db.add(video)
        await db.flush()
        logger.info(f"Video {video.id} published by {user.username}")
        return video

    async def list_videos(
        self,
        db: AsyncSession,
        viewer: User,
        offset: int,
        limit: int,
        sort_by: str = "createdAt",
        descending: bool = True,
        query: Optional[str] = None,
        owner_id: Optional[uuid.UUID] = None,
    ) -> List[VideoWithOwner]:
        column = SORTABLE_COLUMNS.get(sort_by)
        if column is None:
            raise BadRequest(f"Cannot sort by '{sort_by}'.")

        stmt = (
            select(Video, User)
            .join(User, User.id == Video.owner_id)
            .where(or_(Video.is_published.is_(True), Video.owner_id == viewer.id))
        )
        if owner_id is not None:
            stmt = stmt.where(Video.owner_id == owner_id)
        if query:
            pattern = f"%{query.strip()}%"
            stmt = stmt.where(or_(Video.title.ilike(pattern), Video.description.ilike(pattern)))

        order = column.desc() if descending else column.asc()
        stmt = stmt.order_by(order, Video.id).offset(offset).limit(limit)

        result = await db.execute(stmt)
        videos = [VideoWithOwner.from_row(video, owner) for video, owner in result.all()]
        if not videos:
            raise NotFound("No videos found.")
        return videos

    async def get_video(self, db: AsyncSession, video_id: uuid.UUID, viewer: User) -> VideoWithOwner:
        """Fetch one video and record the view in the viewer's history."""
        row = (await db.execute(
            select(Video, User)
            .join(User, User.id == Video.owner_id)
            .where(Video.id == video_id)
        )).first()
        if row is None:
            raise NotFound("No video found.")

        video, owner = row
        if not video.is_published and video.owner_id != viewer.id:
            raise NotFound("No video found.")

        video.views = (video.views or 0) + 1
        await self._record_watch(db, viewer.id, video.id)
        await db.flush()
        return VideoWithOwner.from_row(video, owner)

    async def _record_watch(self, db: AsyncSession, user_id: uuid.UUID, video_id: uuid.UUID) -> None:
        entry = await db.scalar(
            select(WatchHistoryEntry).where(
                WatchHistoryEntry.user_id == user_id,
                WatchHistoryEntry.video_id == video_id,
            )
        )
        if entry is None:
            db.add(WatchHistoryEntry(user_id=user_id, video_id=video_id))
        else:
            entry.watched_at = utcnow()

    async def update_details(
        self, db: AsyncSession, video_id: uuid.UUID, user: User, title: str, description: str
    ) -> Video:
        video = await load_owned(db, Video, video_id, user, "update", "video")
        video.title = title.strip()
        video.description = description.strip()
        await db.flush()
        return video

    async def replace_thumbnail(
        self, db: AsyncSession, video_id: uuid.UUID, user: User, upload: Optional[UploadFile]
    ) -> Video:
        if upload is None or not upload.filename:
            raise BadRequest("Thumbnail is required.")

        video = await load_owned(db, Video, video_id, user, "update", "video")

        (thumbnail_path,) = await spool_uploads(upload)
        stored = await storage_service.upload(thumbnail_path, THUMBNAIL_FOLDER)
        if stored is None:
            raise InternalError("Error uploading thumbnail.")

        previous = video.thumbnail_public_id
        video.thumbnail_url = stored.url
        video.thumbnail_public_id = stored.public_id
        await db.commit()

        tasks.remove_asset(previous, AssetKind.IMAGE)
        return video

    async def toggle_publish(self, db: AsyncSession, video_id: uuid.UUID, user: User) -> Video:
        video = await load_owned(db, Video, video_id, user, "publish", "video")
        video.is_published = not video.is_published
        await db.flush()
        return video

    async def delete_video(self, db: AsyncSession, video_id: uuid.UUID, user: User) -> None:
        video = await load_owned(db, Video, video_id, user, "delete", "video")

        comment_ids = select(Comment.id).where(Comment.video_id == video.id)
        await db.execute(
            delete(Like).where(
                or_(
                    (Like.target_kind == LikeTarget.VIDEO) & (Like.target_id == video.id),
                    (Like.target_kind == LikeTarget.COMMENT) & (Like.target_id.in_(comment_ids)),
                )
            )
        )
        await db.execute(delete(Comment).where(Comment.video_id == video.id))
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.video_id == video.id))
        await db.execute(delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id == video.id))

        file_id, thumbnail_id = video.video_file_public_id, video.thumbnail_public_id
        await db.delete(video)
        await db.commit()

        tasks.remove_asset(file_id, AssetKind.VIDEO)
        tasks.remove_asset(thumbnail_id, AssetKind.IMAGE)
        logger.info(f"Video {video_id} deleted by {user.username}")

    async def channel_videos(self, db: AsyncSession, user: User) -> List[Video]:
        result = await db.execute(
            select(Video).where(Video.owner_id == user.id).order_by(Video.created_at.desc())
        )
        videos = list(result.scalars().all())
        if not videos:
            raise NotFound("No video found.")
        return videos


video_service = VideoService()
