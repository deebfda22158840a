"""
TubeHub Account Service - registration, sessions and profile management.

Session model: one active refresh token per account, stored on the user
row. Every login or refresh overwrites it, so a rotated-out token stops
working on its next use.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from fastapi import UploadFile
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.core.config import get_settings
from tubehub.core.errors import BadRequest, InternalError, NotFound, Unauthorized
from tubehub.core.security import (
    PURPOSE_EMAIL_VERIFICATION,
    PURPOSE_PASSWORD_RESET,
    InvalidTokenError,
    issue_access_token,
    issue_email_token,
    issue_password_reset_token,
    issue_refresh_token,
    verify_token,
)
from tubehub.core.validation import normalize_email, normalize_username, validate_email
from tubehub.models.models import AssetKind, Subscription, User, Video, WatchHistoryEntry
from tubehub.schemas.schemas import AssetSchema, ChannelProfile, VideoWithOwner
from tubehub.services.media.storage_service import discard_temp, spool_uploads, storage_service
from tubehub.services.notifications.email_service import email_service
from tubehub.workers import tasks

logger = logging.getLogger(__name__)
settings = get_settings()

AVATAR_FOLDER = "users/avatars"
COVER_FOLDER = "users/cover-images"


class AccountService:
    """Account lifecycle and the token/session flows built on it."""

    # ── Registration ─────────────────────────────────────────────────────

    async def register(
        self,
        db: AsyncSession,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None,
    ) -> User:
        if not all(field and field.strip() for field in (username, email, full_name, password)):
            raise BadRequest("All fields are required.")

        username = normalize_username(username)
        email = normalize_email(email)
        if not validate_email(email):
            raise BadRequest("Email is not valid.")

        existing = await db.scalar(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
        if existing is not None:
            raise Unauthorized("User with email or username already exists.")

        if avatar is None or not avatar.filename:
            raise BadRequest("Avatar is required.")

        avatar_path, cover_path = await spool_uploads(avatar, cover_image)

        stored_avatar = await storage_service.upload(avatar_path, AVATAR_FOLDER)
        if stored_avatar is None:
            discard_temp(cover_path)
            raise InternalError("Error uploading avatar.")

        stored_cover = None
        if cover_path is not None:
            stored_cover = await storage_service.upload(cover_path, COVER_FOLDER)

        user = User(
            username=username,
            email=email,
            full_name=full_name.strip(),
            password=password,
            avatar_url=stored_avatar.url,
            avatar_public_id=stored_avatar.public_id,
            cover_image_url=stored_cover.url if stored_cover else None,
            cover_image_public_id=stored_cover.public_id if stored_cover else None,
        )
        db.add(user)
        await db.flush()

        user.email_token = issue_email_token(user)
        await db.commit()

        tasks.send_email(email_service.verification_email(user.email, user.full_name, user.email_token))
        logger.info(f"Registered user {user.username} ({user.id})")
        return user

    async def confirm_email(self, db: AsyncSession, email_token: Optional[str]) -> None:
        if not email_token:
            raise BadRequest("Email token is needed.")

        try:
            claims = verify_token(
                email_token, settings.email_token_secret, purpose=PURPOSE_EMAIL_VERIFICATION
            )
        except InvalidTokenError as e:
            raise Unauthorized(str(e))

        user = await db.get(User, claims["sub"])
        if user is None:
            raise Unauthorized("Token is expired or invalid.")
        if user.is_verified_email:
            raise Unauthorized("Email is already verified.")
        if email_token != user.email_token:
            raise Unauthorized("Email token is expired.")

        user.is_verified_email = True
        user.email_token = None

    # ── Sessions ─────────────────────────────────────────────────────────

    async def _rotate_tokens(self, db: AsyncSession, user: User) -> Tuple[str, str]:
        access_token = issue_access_token(user)
        refresh_token = issue_refresh_token(user)
        user.refresh_token = refresh_token
        await db.flush()
        return access_token, refresh_token

    async def login(
        self,
        db: AsyncSession,
        password: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Tuple[User, str, str]:
        if not (username or email):
            raise BadRequest("Email or username is required.")
        if email and not validate_email(normalize_email(email)):
            raise BadRequest("Email is not valid.")
        if not password:
            raise BadRequest("Password is required.")

        conditions = []
        if email:
            conditions.append(User.email == normalize_email(email))
        if username:
            conditions.append(User.username == normalize_username(username))
        user = await db.scalar(select(User).where(or_(*conditions)))
        if user is None:
            raise NotFound("User does not exist.")

        if not user.is_password_correct(password):
            raise Unauthorized("Password is not valid.")

        access_token, refresh_token = await self._rotate_tokens(db, user)
        logger.info(f"User {user.username} logged in")
        return user, access_token, refresh_token

    async def logout(self, db: AsyncSession, user: User) -> None:
        user.refresh_token = None
        await db.flush()

    async def refresh(self, db: AsyncSession, incoming: Optional[str]) -> Tuple[str, str]:
        if not incoming:
            raise Unauthorized("Unauthorized request.")

        try:
            claims = verify_token(incoming, settings.refresh_token_secret)
        except InvalidTokenError as e:
            raise Unauthorized(str(e))

        user = await db.get(User, claims["sub"])
        if user is None:
            raise Unauthorized("Invalid refresh token.")
        if incoming != user.refresh_token:
            logger.warning(f"Stale refresh token presented for user {user.id}")
            raise Unauthorized("Refresh token is expired or used.")

        return await self._rotate_tokens(db, user)

    # ── Passwords ────────────────────────────────────────────────────────

    async def change_password(self, db: AsyncSession, user: User, old_password: str, new_password: str) -> None:
        if not user.is_password_correct(old_password):
            raise BadRequest("Old password is not correct.")
        user.password = new_password
        await db.flush()

    async def forgot_password(self, db: AsyncSession, email: str) -> None:
        email = normalize_email(email)
        if not validate_email(email):
            raise BadRequest("Email is not valid.")

        user = await db.scalar(select(User).where(User.email == email))
        if user is None:
            raise NotFound("No user found.")

        user.password_reset_token = issue_password_reset_token(user)
        await db.commit()
        tasks.send_email(
            email_service.password_reset_email(user.email, user.full_name, user.password_reset_token)
        )

    async def reset_password(self, db: AsyncSession, token: str, new_password: str) -> None:
        try:
            claims = verify_token(token, settings.email_token_secret, purpose=PURPOSE_PASSWORD_RESET)
        except InvalidTokenError as e:
            raise Unauthorized(str(e))

        user = await db.get(User, claims["sub"])
        if user is None or token != user.password_reset_token:
            raise Unauthorized("Reset token is expired or invalid.")

        user.password = new_password
        user.password_reset_token = None
        user.refresh_token = None
        await db.flush()

    # ── Profile ──────────────────────────────────────────────────────────

    async def update_details(self, db: AsyncSession, user: User, email: str, full_name: str) -> User:
        email = normalize_email(email)
        if not validate_email(email):
            raise BadRequest("Email is not valid.")

        if email != user.email:
            taken = await db.scalar(select(User.id).where(User.email == email, User.id != user.id))
            if taken is not None:
                raise BadRequest("Email is already in use.")
            # a changed address has to be verified again
            user.is_verified_email = False

        user.email = email
        user.full_name = full_name.strip()
        await db.flush()
        return user

    async def replace_avatar(self, db: AsyncSession, user: User, upload: Optional[UploadFile]) -> User:
        if upload is None or not upload.filename:
            raise BadRequest("Avatar is required.")

        (avatar_path,) = await spool_uploads(upload)
        stored = await storage_service.upload(avatar_path, AVATAR_FOLDER)
        if stored is None:
            raise InternalError("Error while uploading avatar.")

        previous = user.avatar_public_id
        user.avatar_url = stored.url
        user.avatar_public_id = stored.public_id
        await db.commit()

        tasks.remove_asset(previous, AssetKind.IMAGE)
        return user

    async def replace_cover_image(self, db: AsyncSession, user: User, upload: Optional[UploadFile]) -> User:
        if upload is None or not upload.filename:
            raise BadRequest("Cover image is required.")

        (cover_path,) = await spool_uploads(upload)
        stored = await storage_service.upload(cover_path, COVER_FOLDER)
        if stored is None:
            raise InternalError("Error while uploading cover image.")

        previous = user.cover_image_public_id
        user.cover_image_url = stored.url
        user.cover_image_public_id = stored.public_id
        await db.commit()

        tasks.remove_asset(previous, AssetKind.IMAGE)
        return user

    # ── Read models ──────────────────────────────────────────────────────

    async def channel_profile(self, db: AsyncSession, username: str, viewer: User) -> ChannelProfile:
        if not username or not username.strip():
            raise BadRequest("Username is missing.")

        channel = await db.scalar(select(User).where(User.username == normalize_username(username)))
        if channel is None:
            raise NotFound("Channel does not exist.")

        subscriber_count = await db.scalar(
            select(func.count(Subscription.id)).where(Subscription.channel_id == channel.id)
        ) or 0
        subscribed_to_count = await db.scalar(
            select(func.count(Subscription.id)).where(Subscription.subscriber_id == channel.id)
        ) or 0
        is_subscribed = await db.scalar(
            select(Subscription.id).where(
                Subscription.channel_id == channel.id,
                Subscription.subscriber_id == viewer.id,
            )
        ) is not None

        cover = None
        if channel.cover_image_url:
            cover = AssetSchema(url=channel.cover_image_url, public_id=channel.cover_image_public_id or "")

        return ChannelProfile(
            id=str(channel.id),
            username=channel.username,
            email=channel.email,
            full_name=channel.full_name,
            avatar=AssetSchema(url=channel.avatar_url, public_id=channel.avatar_public_id),
            cover_image=cover,
            subscriber_count=subscriber_count,
            channels_subscribed_to_count=subscribed_to_count,
            is_subscribed=is_subscribed,
        )

    async def watch_history(self, db: AsyncSession, user: User) -> list:
        """Most recently watched first, owners inlined."""
        result = await db.execute(
            select(Video, User)
            .select_from(WatchHistoryEntry)
            .join(Video, Video.id == WatchHistoryEntry.video_id)
            .join(User, User.id == Video.owner_id)
            .where(WatchHistoryEntry.user_id == user.id)
            .order_by(WatchHistoryEntry.watched_at.desc())
        )
        return [VideoWithOwner.from_row(video, owner) for video, owner in result.all()]


account_service = AccountService()
