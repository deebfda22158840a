"""
TubeHub - Main FastAPI Application

Video sharing backend: accounts, videos, comments, tweets, playlists,
subscriptions, likes and a channel dashboard.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from tubehub.core.config import get_settings
from tubehub.core.database import init_db
from tubehub.core.errors import register_exception_handlers

settings = get_settings()

# ── Logging ──────────────────────────────────────────────────────────────

logging.basicConfig(level=logging.getLevelName(settings.log_level), format="%(levelname)s %(name)s: %(message)s")

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
)

logger = structlog.get_logger()


# ── Lifespan ─────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting TubeHub", version=settings.app_version)
    await init_db()
    logger.info("TubeHub ready", api_prefix=settings.api_prefix)

    yield

    logger.info("Shutting down TubeHub")


# ── App ──────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Video sharing platform API",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Prometheus metrics
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

register_exception_handlers(app)

# ── Routes ───────────────────────────────────────────────────────────────

from tubehub.api.routes import comments, dashboard, likes, playlists, subscriptions, tweets, users, videos  # noqa: E402

app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(videos.router, prefix=settings.api_prefix)
app.include_router(comments.router, prefix=settings.api_prefix)
app.include_router(tweets.router, prefix=settings.api_prefix)
app.include_router(playlists.router, prefix=settings.api_prefix)
app.include_router(subscriptions.router, prefix=settings.api_prefix)
app.include_router(likes.router, prefix=settings.api_prefix)
app.include_router(dashboard.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "api": settings.api_prefix,
        "resources": [
            "users", "videos", "comments", "tweets",
            "playlists", "subscriptions", "likes", "dashboard",
        ],
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "healthy", "version": settings.app_version}
