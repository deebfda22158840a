"""
TubeHub API - Playlist routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import User
from tubehub.schemas.schemas import PlaylistRequest
from tubehub.services.content.playlist_service import playlist_service

router = APIRouter(prefix="/playlists", tags=["Playlists"], dependencies=[Depends(get_current_user)])


@router.post("/")
async def create_playlist(
    payload: PlaylistRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.create(db, user, payload.name, payload.description)
    return api_response(201, await playlist_service.to_schema(db, playlist), "Playlist created.")


@router.get("/user/{user_id}")
async def list_user_playlists(user_id: str, db: AsyncSession = Depends(get_db)):
    playlists = await playlist_service.list_for_user(db, parse_id(user_id, "user"))
    return api_response(200, playlists, "Playlists fetched successfully.")


@router.get("/{playlist_id}")
async def get_playlist(playlist_id: str, db: AsyncSession = Depends(get_db)):
    """Playlist with its videos in insertion order, each with its owner."""
    detail = await playlist_service.get_detail(db, parse_id(playlist_id, "playlist"))
    return api_response(200, detail, "Playlist fetched successfully.")


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await playlist_service.add_video(
        db, parse_id(playlist_id, "playlist"), parse_id(video_id, "video"), user
    )
    return api_response(200, message="Video added successfully.")


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video(
    video_id: str,
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await playlist_service.remove_video(
        db, parse_id(playlist_id, "playlist"), parse_id(video_id, "video"), user
    )
    return api_response(200, message="Video removed successfully.")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    payload: PlaylistRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    playlist = await playlist_service.update(
        db, parse_id(playlist_id, "playlist"), user, payload.name, payload.description
    )
    return api_response(200, await playlist_service.to_schema(db, playlist), "Playlist updated successfully.")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await playlist_service.delete(db, parse_id(playlist_id, "playlist"), user)
    return api_response(200, message="Playlist deleted successfully.")
