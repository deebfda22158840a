"""
TubeHub API - Tweet routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import api_response
from tubehub.core.validation import parse_id
from tubehub.models.models import User
from tubehub.schemas.schemas import ContentRequest, TweetSchema
from tubehub.services.content.tweet_service import tweet_service

router = APIRouter(prefix="/tweets", tags=["Tweets"], dependencies=[Depends(get_current_user)])


@router.post("/")
async def create_tweet(
    payload: ContentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await tweet_service.create(db, user, payload.content)
    return api_response(201, TweetSchema.from_model(tweet), "Tweet created.")


@router.get("/user/{user_id}")
async def list_user_tweets(user_id: str, db: AsyncSession = Depends(get_db)):
    tweets = await tweet_service.list_for_user(db, parse_id(user_id, "user"))
    return api_response(200, tweets, "Tweets fetched successfully.")


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str,
    payload: ContentRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tweet = await tweet_service.update(db, parse_id(tweet_id, "tweet"), user, payload.content)
    return api_response(200, TweetSchema.from_model(tweet), "Tweet updated successfully.")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await tweet_service.delete(db, parse_id(tweet_id, "tweet"), user)
    return api_response(200, message="Tweet deleted successfully.")
