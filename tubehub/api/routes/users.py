"""
TubeHub API - Account routes: registration, sessions, profile and history.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from tubehub.api.deps import get_current_user
from tubehub.core.database import get_db
from tubehub.core.responses import REFRESH_COOKIE, api_response, clear_session_cookies, set_session_cookies
from tubehub.models.models import User
from tubehub.schemas.schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    ResetPasswordRequest,
    TokenPair,
    UpdateAccountRequest,
    UserSchema,
)
from tubehub.services.accounts.account_service import account_service

router = APIRouter(prefix="/users", tags=["Users"])


# ── Registration ─────────────────────────────────────────────────────────

@router.post("/register")
async def register(
    username: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    full_name: Optional[str] = Form(None, alias="fullName"),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_db),
):
    user = await account_service.register(
        db,
        username=username,
        email=email,
        full_name=full_name,
        password=password,
        avatar=avatar,
        cover_image=cover_image,
    )
    return api_response(201, UserSchema.from_model(user), "User registered Successfully.")


@router.get("/confirm-email")
async def confirm_email(
    email_token: Optional[str] = Query(None, alias="emailToken"),
    db: AsyncSession = Depends(get_db),
):
    await account_service.confirm_email(db, email_token)
    return api_response(200, message="User email verified Successfully.")


# ── Sessions ─────────────────────────────────────────────────────────────

@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Issue an access/refresh pair, in the body and as session cookies."""
    user, access_token, refresh_token = await account_service.login(
        db, password=payload.password, username=payload.username, email=payload.email
    )
    body = LoginResponse(
        user=UserSchema.from_model(user),
        access_token=access_token,
        refresh_token=refresh_token,
    )
    response = api_response(200, body, "Logged in successfully.")
    return set_session_cookies(response, access_token, refresh_token)


@router.post("/logout")
async def logout(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    await account_service.logout(db, user)
    return clear_session_cookies(api_response(200, message="User logged out successfully."))


@router.post("/refresh-token")
async def refresh_token(
    request: Request,
    payload: Optional[RefreshTokenRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    """Rotate the session; the refresh token comes from the cookie or the body."""
    incoming = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    access_token, new_refresh_token = await account_service.refresh(db, incoming)
    response = api_response(
        200,
        TokenPair(access_token=access_token, refresh_token=new_refresh_token),
        "Access token refreshed.",
    )
    return set_session_cookies(response, access_token, new_refresh_token)


# ── Passwords ────────────────────────────────────────────────────────────

@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await account_service.change_password(db, user, payload.old_password, payload.new_password)
    return api_response(200, message="Password updated successfully.")


@router.post("/forgot-password")
async def forgot_password(payload: ForgotPasswordRequest, db: AsyncSession = Depends(get_db)):
    await account_service.forgot_password(db, payload.email)
    return api_response(200, message="Password reset link sent.")


@router.post("/reset-password")
async def reset_password(payload: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    await account_service.reset_password(db, payload.token, payload.new_password)
    return api_response(200, message="Password reset successfully.")


# ── Profile ──────────────────────────────────────────────────────────────

@router.get("/current-user")
async def current_user(user: User = Depends(get_current_user)):
    return api_response(200, UserSchema.from_model(user), "User details fetched successfully.")


@router.patch("/update-account")
async def update_account(
    payload: UpdateAccountRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await account_service.update_details(db, user, payload.email, payload.full_name)
    return api_response(200, UserSchema.from_model(user), "User details updated.")


@router.patch("/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await account_service.replace_avatar(db, user, avatar)
    return api_response(200, UserSchema.from_model(user), "Avatar updated.")


@router.patch("/cover-image")
async def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await account_service.replace_cover_image(db, user, cover_image)
    return api_response(200, UserSchema.from_model(user), "Cover image updated.")


# ── Read models ──────────────────────────────────────────────────────────

@router.get("/c/{username}")
async def channel_profile(
    username: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    profile = await account_service.channel_profile(db, username, user)
    return api_response(200, profile, "User channel fetched successfully.")


@router.get("/history")
async def watch_history(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    history = await account_service.watch_history(db, user)
    return api_response(200, history, "Watch history fetched successfully.")
