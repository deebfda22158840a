"""
Uniform response envelope: ``{statusCode, success, data, message}``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tubehub.core.config import get_settings

settings = get_settings()

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, (list, tuple)):
        return [_dump(item) for item in data]
    if isinstance(data, dict):
        return {key: _dump(value) for key, value in data.items()}
    return jsonable_encoder(data)


def api_response(status_code: int, data: Any = None, message: str = "Success") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "success": status_code < 400,
            "data": _dump(data) if data is not None else {},
            "message": message,
        },
    )


def api_error(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "success": False,
            "data": None,
            "message": message,
        },
        headers=headers,
    )


# ── Session cookies ──────────────────────────────────────────────────────

def _cookie_options() -> Dict[str, Any]:
    return {
        "httponly": settings.cookie_httponly,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "path": "/",
    }


def set_session_cookies(response: JSONResponse, access_token: str, refresh_token: str) -> JSONResponse:
    options = _cookie_options()
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)
    return response


def clear_session_cookies(response: JSONResponse) -> JSONResponse:
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response
