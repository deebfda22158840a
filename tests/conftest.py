"""
Shared fixtures: a throwaway sqlite database, an in-memory object store in
place of MinIO, recorded outbound mail and Celery running tasks inline.
"""
import asyncio
import os
import re
import tempfile
from pathlib import Path

_WORKDIR = Path(tempfile.mkdtemp(prefix="tubehub-tests-"))

os.environ.setdefault("TUBEHUB_DB_URL", f"sqlite+aiosqlite:///{_WORKDIR / 'tubehub.db'}")
os.environ.setdefault("TUBEHUB_UPLOAD_TEMP_DIR", str(_WORKDIR / "uploads"))
os.environ.setdefault("TUBEHUB_COOKIE_SECURE", "false")
os.environ.setdefault("TUBEHUB_COOKIE_SAMESITE", "lax")
os.environ.setdefault("TUBEHUB_CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("TUBEHUB_CELERY_BROKER_URL", "memory://")
os.environ.setdefault("TUBEHUB_CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("TUBEHUB_MINIO_PUBLIC_URL", "http://assets.test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tubehub.core.database import drop_db, init_db  # noqa: E402
from tubehub.main import app  # noqa: E402
from tubehub.services.media.storage_service import storage_service  # noqa: E402
from tubehub.services.notifications.email_service import email_service  # noqa: E402

API = "/api/v1"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
MP4 = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 128


class FakeMinio:
    """Just enough of ``minio.Minio`` for the storage delegate."""

    def __init__(self):
        self.buckets = set()
        self.objects = {}
        self.removed = []

    def bucket_exists(self, bucket):
        return bucket in self.buckets

    def make_bucket(self, bucket):
        self.buckets.add(bucket)

    def fput_object(self, bucket, object_name, file_path, content_type=None):
        self.objects[(bucket, object_name)] = Path(file_path).read_bytes()

    def remove_object(self, bucket, object_name):
        self.removed.append(object_name)
        if self.objects.pop((bucket, object_name), None) is None:
            raise FileNotFoundError(object_name)

    def has(self, object_name):
        return any(name == object_name for _, name in self.objects)


@pytest.fixture(autouse=True)
def fresh_db():
    asyncio.run(drop_db())
    asyncio.run(init_db())
    yield


@pytest.fixture
def minio(monkeypatch):
    fake = FakeMinio()
    monkeypatch.setattr(storage_service, "_client", fake)
    monkeypatch.setattr(storage_service, "_known_buckets", set())
    return fake


@pytest.fixture
def outbox(monkeypatch):
    sent = []
    monkeypatch.setattr(email_service, "send", sent.append)
    return sent


@pytest.fixture
def client(minio, outbox):
    with TestClient(app) as c:
        yield c


# ── Helpers ──────────────────────────────────────────────────────────────

def register(client, username="ana", email=None, full_name=None, password="pw", cover=False):
    files = {"avatar": ("avatar.png", PNG, "image/png")}
    if cover:
        files["coverImage"] = ("cover.png", PNG, "image/png")
    return client.post(
        f"{API}/users/register",
        data={
            "username": username,
            "email": email or f"{username}@x.com",
            "fullName": full_name or username.capitalize(),
            "password": password,
        },
        files=files,
    )


def login(client, username="ana", password="pw"):
    return client.post(f"{API}/users/login", json={"username": username, "password": password})


def auth(client, username="ana", password="pw", **register_kwargs):
    """Register + log in; returns Bearer headers and drops the session cookies."""
    register(client, username=username, password=password, **register_kwargs)
    res = login(client, username, password)
    assert res.status_code == 200, res.json()
    client.cookies.clear()
    return {"Authorization": f"Bearer {res.json()['data']['accessToken']}"}


def user_id(client, headers):
    return client.get(f"{API}/users/current-user", headers=headers).json()["data"]["id"]


def publish(client, headers, title="First video", description="About things"):
    res = client.post(
        f"{API}/videos/",
        data={"title": title, "description": description},
        files={
            "videoFile": ("clip.mp4", MP4, "video/mp4"),
            "thumbnail": ("thumb.png", PNG, "image/png"),
        },
        headers=headers,
    )
    assert res.status_code == 201, res.json()
    return res.json()["data"]


def token_from(message):
    return re.search(r"token=([^\"&]+)", message.html).group(1)
