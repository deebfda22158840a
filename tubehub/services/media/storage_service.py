"""
TubeHub Media Asset Delegate - moves uploaded temp files into MinIO.

Contract:
  - ``upload`` always deletes the local temp file, success or failure, and
    returns ``None`` instead of raising on any transport error.
  - ``remove`` is best-effort: failures are logged and swallowed.
"""
from __future__ import annotations

import asyncio
import json
import logging
import mimetypes
import os
import shutil
import subprocess
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile
from minio import Minio

from tubehub.core.config import get_settings
from tubehub.core.errors import BadRequest
from tubehub.models.models import AssetKind

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class StoredAsset:
    url: str
    public_id: str
    duration: float = 0.0


class StorageService:
    """Thin wrapper around the MinIO client."""

    def __init__(self):
        self._client: Optional[Minio] = None
        self._known_buckets: set = set()

    @property
    def client(self) -> Minio:
        if self._client is None:
            self._client = Minio(
                settings.minio_endpoint,
                access_key=settings.minio_access_key,
                secret_key=settings.minio_secret_key,
                secure=settings.minio_secure,
            )
        return self._client

    @staticmethod
    def bucket_for(kind: AssetKind) -> str:
        if kind == AssetKind.VIDEO:
            return settings.minio_bucket_videos
        return settings.minio_bucket_images

    def public_url(self, kind: AssetKind, object_name: str) -> str:
        return f"{settings.minio_public_url.rstrip('/')}/{self.bucket_for(kind)}/{object_name}"

    def _ensure_bucket(self, bucket: str) -> None:
        if bucket in self._known_buckets:
            return
        if not self.client.bucket_exists(bucket):
            self.client.make_bucket(bucket)
        self._known_buckets.add(bucket)

    # ── Upload ───────────────────────────────────────────────────────────

    def upload_sync(
        self,
        local_path: Optional[Path],
        folder: str,
        kind: AssetKind = AssetKind.IMAGE,
    ) -> Optional[StoredAsset]:
        if not local_path:
            logger.warning("No local file path given for upload")
            return None

        local_path = Path(local_path)
        try:
            duration = probe_duration(local_path) if kind == AssetKind.VIDEO else 0.0
            object_name = f"{folder.strip('/')}/{uuid.uuid4().hex}{local_path.suffix.lower()}"
            content_type = mimetypes.guess_type(local_path.name)[0] or "application/octet-stream"
            bucket = self.bucket_for(kind)

            self._ensure_bucket(bucket)
            self.client.fput_object(bucket, object_name, str(local_path), content_type=content_type)
            logger.info(f"Uploaded {local_path.name} -> {bucket}/{object_name}")
            return StoredAsset(
                url=self.public_url(kind, object_name),
                public_id=object_name,
                duration=duration,
            )
        except Exception as e:
            logger.error(f"Error uploading {local_path.name} to object storage: {e}")
            return None
        finally:
            _unlink_quietly(local_path)

    async def upload(
        self,
        local_path: Optional[Path],
        folder: str,
        kind: AssetKind = AssetKind.IMAGE,
    ) -> Optional[StoredAsset]:
        return await asyncio.to_thread(self.upload_sync, local_path, folder, kind)

    # ── Remove ───────────────────────────────────────────────────────────

    def remove(self, public_id: Optional[str], kind: AssetKind = AssetKind.IMAGE) -> None:
        if not public_id:
            return
        bucket = self.bucket_for(kind)
        try:
            self.client.remove_object(bucket, public_id)
            logger.info(f"Removed {kind.value} asset {bucket}/{public_id}")
        except Exception as e:
            logger.warning(f"Error removing {kind.value} asset {public_id}: {e}")


# ── Temp files ───────────────────────────────────────────────────────────

def save_upload_to_temp(upload: Optional[UploadFile]) -> Optional[Path]:
    """Spool a multipart file to the temp dir; the delegate deletes it later."""
    if upload is None or not upload.filename:
        return None

    temp_dir = Path(settings.upload_temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename).suffix.lower()
    target = temp_dir / f"{uuid.uuid4().hex}{suffix}"

    try:
        upload.file.seek(0)
        with open(target, "wb") as out:
            shutil.copyfileobj(upload.file, out)
    except BaseException:
        _unlink_quietly(target)
        raise

    if target.stat().st_size > settings.max_upload_mb * 1024 * 1024:
        _unlink_quietly(target)
        raise BadRequest(f"{upload.filename} exceeds the {settings.max_upload_mb} MB upload limit.")
    return target


async def spool_uploads(*uploads: Optional[UploadFile]) -> List[Optional[Path]]:
    """Spool every file off the event loop before anything is stored remotely.

    If one of them fails (size cap, disk error) the ones already written are
    removed, so a rejected request leaves nothing behind.
    """
    paths: List[Optional[Path]] = []
    try:
        for upload in uploads:
            paths.append(await asyncio.to_thread(save_upload_to_temp, upload))
    except BaseException:
        discard_temp(*paths)
        raise
    return paths


def discard_temp(*paths: Optional[Path]) -> None:
    for path in paths:
        if path:
            _unlink_quietly(Path(path))


def _unlink_quietly(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Cleanup failed for {path}: {e}")


def probe_duration(media_path: Path) -> float:
    """Duration in seconds via ffprobe; 0.0 when it cannot be read."""
    try:
        probe_out = subprocess.run(
            [
                "ffprobe", "-v", "quiet", "-print_format", "json",
                "-show_format", str(media_path),
            ],
            capture_output=True, text=True, timeout=30,
        )
        probe = json.loads(probe_out.stdout) if probe_out.returncode == 0 else {}
        return round(float(probe.get("format", {}).get("duration", 0.0)), 2)
    except Exception as e:
        logger.debug(f"ffprobe skipped: {e}")
        return 0.0


storage_service = StorageService()
