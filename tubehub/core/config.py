"""
TubeHub Core Settings.

Every value can be overridden through the environment (``TUBEHUB_`` prefix)
or a local ``.env`` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8",
        env_prefix="TUBEHUB_", case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "TubeHub"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # ── PostgreSQL ───────────────────────────────────────────────────────
    db_host: str = "postgres"
    db_port: int = 5432
    db_user: str = "tubehub"
    db_password: str = "tubehub_secret"
    db_name: str = "tubehub"
    db_url: Optional[str] = None

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # ── Tokens ───────────────────────────────────────────────────────────
    jwt_algorithm: str = "HS256"
    access_token_secret: str = "change-me-access"
    access_token_expire_minutes: int = 15
    refresh_token_secret: str = "change-me-refresh"
    refresh_token_expire_days: int = 10
    email_token_secret: str = "change-me-email"
    email_token_expire_hours: int = 24
    password_reset_token_expire_minutes: int = 30

    # ── Session cookies ──────────────────────────────────────────────────
    cookie_httponly: bool = True
    cookie_secure: bool = True
    cookie_samesite: str = "none"

    # ── MinIO / S3 ───────────────────────────────────────────────────────
    minio_endpoint: str = "minio:9000"
    minio_access_key: str = "tubehub_minio"
    minio_secret_key: str = "tubehub_minio_secret"
    minio_secure: bool = False
    minio_bucket_images: str = "tubehub-images"
    minio_bucket_videos: str = "tubehub-videos"
    minio_public_url: str = "http://localhost:9000"

    # ── Uploads ──────────────────────────────────────────────────────────
    upload_temp_dir: str = "/tmp/tubehub"
    max_upload_mb: int = 512

    # ── Redis / Celery ───────────────────────────────────────────────────
    celery_broker_url: str = "redis://redis:6379/1"
    celery_result_backend: str = "redis://redis:6379/2"
    celery_task_always_eager: bool = False

    # ── Mail ─────────────────────────────────────────────────────────────
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    mail_from: str = "TubeHub <no-reply@tubehub.app>"
    frontend_url: str = "https://www.tubehub.app"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
