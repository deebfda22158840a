"""
TubeHub Playlist Service.

Membership is an ordered set: a video appears at most once per playlist,
new entries go to the end.
"""
from __future__ import annotations

import uuid
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.errors import BadRequest
from tubehub.core.ownership import get_or_404, load_owned
from tubehub.models.models import Playlist, PlaylistVideo, User, Video
from tubehub.schemas.schemas import (
    AssetSchema, OwnerSchema, PlaylistDetail, PlaylistSchema, PlaylistVideoSchema, PlaylistWithOwner,
)


class PlaylistService:

    async def video_ids(self, db: AsyncSession, playlist_id: uuid.UUID) -> List[uuid.UUID]:
        result = await db.execute(
            select(PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == playlist_id)
            .order_by(PlaylistVideo.position)
        )
        return list(result.scalars().all())

    async def to_schema(self, db: AsyncSession, playlist: Playlist) -> PlaylistSchema:
        return PlaylistSchema(
            id=str(playlist.id),
            name=playlist.name,
            description=playlist.description,
            owner_id=str(playlist.owner_id),
            video_ids=[str(v) for v in await self.video_ids(db, playlist.id)],
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    async def create(self, db: AsyncSession, user: User, name: str, description: str) -> Playlist:
        playlist = Playlist(name=name.strip(), description=description.strip(), owner_id=user.id)
        db.add(playlist)
        await db.flush()
        return playlist

    async def list_for_user(self, db: AsyncSession, user_id: uuid.UUID) -> List[PlaylistWithOwner]:
        owner = await get_or_404(db, User, user_id, "user")

        counts = (
            select(PlaylistVideo.playlist_id, func.count(PlaylistVideo.id).label("video_count"))
            .group_by(PlaylistVideo.playlist_id)
            .subquery()
        )
        result = await db.execute(
            select(Playlist, func.coalesce(counts.c.video_count, 0))
            .outerjoin(counts, counts.c.playlist_id == Playlist.id)
            .where(Playlist.owner_id == owner.id)
            .order_by(Playlist.created_at.desc(), Playlist.id)
        )

        owner_schema = OwnerSchema.from_model(owner)
        return [
            PlaylistWithOwner(
                id=str(p.id),
                name=p.name,
                description=p.description,
                owner=owner_schema,
                video_count=count,
                created_at=p.created_at,
                updated_at=p.updated_at,
            )
            for p, count in result.all()
        ]

    async def get_detail(self, db: AsyncSession, playlist_id: uuid.UUID) -> PlaylistDetail:
        playlist = await get_or_404(db, Playlist, playlist_id, "playlist")
        owner = await db.get(User, playlist.owner_id)

        result = await db.execute(
            select(Video, User)
            .select_from(PlaylistVideo)
            .join(Video, Video.id == PlaylistVideo.video_id)
            .join(User, User.id == Video.owner_id)
            .where(PlaylistVideo.playlist_id == playlist.id)
            .order_by(PlaylistVideo.position)
        )
        videos = [
            PlaylistVideoSchema(
                id=str(video.id),
                title=video.title,
                description=video.description,
                thumbnail=AssetSchema(url=video.thumbnail_url, public_id=video.thumbnail_public_id),
                views=video.views,
                created_at=video.created_at,
                owner=OwnerSchema.from_model(video_owner),
            )
            for video, video_owner in result.all()
        ]

        return PlaylistDetail(
            id=str(playlist.id),
            name=playlist.name,
            description=playlist.description,
            owner=OwnerSchema.from_model(owner),
            videos=videos,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    async def add_video(
        self, db: AsyncSession, playlist_id: uuid.UUID, video_id: uuid.UUID, user: User
    ) -> Playlist:
        playlist = await load_owned(db, Playlist, playlist_id, user, "add videos to", "playlist")
        video = await get_or_404(db, Video, video_id, "video")

        members = await self.video_ids(db, playlist.id)
        if video.id in members:
            raise BadRequest("Video already inside playlist.")

        last = await db.scalar(
            select(func.max(PlaylistVideo.position)).where(PlaylistVideo.playlist_id == playlist.id)
        )
        db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video.id, position=(last or 0) + 1))
        await db.flush()
        return playlist

    async def remove_video(
        self, db: AsyncSession, playlist_id: uuid.UUID, video_id: uuid.UUID, user: User
    ) -> Playlist:
        playlist = await load_owned(db, Playlist, playlist_id, user, "remove videos from", "playlist")
        await get_or_404(db, Video, video_id, "video")

        result = await db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist.id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if result.rowcount == 0:
            raise BadRequest("Video is not inside playlist.")
        await db.flush()
        return playlist

    async def update(
        self, db: AsyncSession, playlist_id: uuid.UUID, user: User, name: str, description: str
    ) -> Playlist:
        playlist = await load_owned(db, Playlist, playlist_id, user, "update", "playlist")
        playlist.name = name.strip()
        playlist.description = description.strip()
        await db.flush()
        return playlist

    async def delete(self, db: AsyncSession, playlist_id: uuid.UUID, user: User) -> None:
        playlist = await load_owned(db, Playlist, playlist_id, user, "delete", "playlist")
        await db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist.id))
        await db.delete(playlist)
        await db.flush()


playlist_service = PlaylistService()
