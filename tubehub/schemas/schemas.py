"""
TubeHub API Schemas - Pydantic v2 models for request/response validation.

Payloads are camelCase on the wire (``fullName``, ``createdAt``,
``avatar.publicId``); Python code uses snake_case names.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

# Surrounding whitespace is dropped before the emptiness check.
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ═══════════════════════════════════════════════════════════════════════
# Shared
# ═══════════════════════════════════════════════════════════════════════

class AssetSchema(CamelModel):
    url: str
    public_id: str


class OwnerSchema(CamelModel):
    """Public-safe projection of an account."""
    id: str
    username: str
    full_name: str
    avatar: AssetSchema

    @classmethod
    def from_model(cls, user) -> "OwnerSchema":
        return cls(
            id=str(user.id),
            username=user.username,
            full_name=user.full_name,
            avatar=AssetSchema(url=user.avatar_url, public_id=user.avatar_public_id),
        )


# ═══════════════════════════════════════════════════════════════════════
# Accounts
# ═══════════════════════════════════════════════════════════════════════

class UserSchema(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: AssetSchema
    cover_image: Optional[AssetSchema] = None
    is_verified_email: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user) -> "UserSchema":
        cover = None
        if user.cover_image_url:
            cover = AssetSchema(url=user.cover_image_url, public_id=user.cover_image_public_id or "")
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=AssetSchema(url=user.avatar_url, public_id=user.avatar_public_id),
            cover_image=cover,
            is_verified_email=user.is_verified_email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginRequest(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def _identity_required(self):
        if not (self.username or self.email):
            raise ValueError("Email or username is required.")
        if not self.password:
            raise ValueError("Password is required.")
        return self


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class LoginResponse(TokenPair):
    user: UserSchema


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UpdateAccountRequest(CamelModel):
    email: RequiredText
    full_name: RequiredText


class ForgotPasswordRequest(CamelModel):
    email: RequiredText


class ResetPasswordRequest(CamelModel):
    token: RequiredText
    new_password: str = Field(..., min_length=1)


class ChannelProfile(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: AssetSchema
    cover_image: Optional[AssetSchema] = None
    subscriber_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool


# ═══════════════════════════════════════════════════════════════════════
# Videos
# ═══════════════════════════════════════════════════════════════════════

class VideoSchema(CamelModel):
    id: str
    title: str
    description: str
    video_file: AssetSchema
    thumbnail: AssetSchema
    duration: float
    views: int
    is_published: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, video) -> "VideoSchema":
        return cls(
            id=str(video.id),
            title=video.title,
            description=video.description,
            video_file=AssetSchema(url=video.video_file_url, public_id=video.video_file_public_id),
            thumbnail=AssetSchema(url=video.thumbnail_url, public_id=video.thumbnail_public_id),
            duration=video.duration,
            views=video.views,
            is_published=video.is_published,
            owner_id=str(video.owner_id),
            created_at=video.created_at,
            updated_at=video.updated_at,
        )


class VideoWithOwner(VideoSchema):
    owner: OwnerSchema

    @classmethod
    def from_row(cls, video, owner) -> "VideoWithOwner":
        base = VideoSchema.from_model(video)
        return cls(**base.model_dump(), owner=OwnerSchema.from_model(owner))


class UpdateVideoRequest(CamelModel):
    title: RequiredText
    description: RequiredText


class PlaylistVideoSchema(CamelModel):
    id: str
    title: str
    description: str
    thumbnail: AssetSchema
    views: int
    created_at: datetime
    owner: OwnerSchema


# ═══════════════════════════════════════════════════════════════════════
# Comments & Tweets
# ═══════════════════════════════════════════════════════════════════════

class ContentRequest(CamelModel):
    content: RequiredText


class CommentSchema(CamelModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, comment) -> "CommentSchema":
        return cls(
            id=str(comment.id),
            content=comment.content,
            video_id=str(comment.video_id),
            owner_id=str(comment.owner_id),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentWithOwner(CamelModel):
    id: str
    content: str
    owner: OwnerSchema
    created_at: datetime
    updated_at: datetime


class TweetSchema(CamelModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, tweet) -> "TweetSchema":
        return cls(
            id=str(tweet.id),
            content=tweet.content,
            owner_id=str(tweet.owner_id),
            created_at=tweet.created_at,
            updated_at=tweet.updated_at,
        )


class TweetWithOwner(CamelModel):
    id: str
    content: str
    owner: OwnerSchema
    created_at: datetime
    updated_at: datetime


# ═══════════════════════════════════════════════════════════════════════
# Playlists
# ═══════════════════════════════════════════════════════════════════════

class PlaylistRequest(CamelModel):
    name: RequiredText
    description: RequiredText


class PlaylistSchema(CamelModel):
    id: str
    name: str
    description: str
    owner_id: str
    video_ids: List[str] = []
    created_at: datetime
    updated_at: datetime


class PlaylistWithOwner(CamelModel):
    id: str
    name: str
    description: str
    owner: OwnerSchema
    video_count: int
    created_at: datetime
    updated_at: datetime


class PlaylistDetail(CamelModel):
    id: str
    name: str
    description: str
    owner: OwnerSchema
    videos: List[PlaylistVideoSchema]
    created_at: datetime
    updated_at: datetime


# ═══════════════════════════════════════════════════════════════════════
# Social graph & dashboard
# ═══════════════════════════════════════════════════════════════════════

class ChannelSummary(CamelModel):
    id: str
    username: str
    full_name: str
    avatar: AssetSchema
    cover_image: Optional[AssetSchema] = None


class ToggleResult(CamelModel):
    active: bool


class ChannelStats(CamelModel):
    total_videos: int
    total_views: int
    total_video_likes: int
    subscribers: int
