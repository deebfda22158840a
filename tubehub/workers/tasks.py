"""
TubeHub Celery Worker Tasks

Best-effort side effects that must never slow down or fail a request:
- Verification / password-reset email delivery
- Removal of replaced or orphaned remote assets
"""
from __future__ import annotations

import logging

from celery import Celery

from tubehub.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# ── Celery App ───────────────────────────────────────────────────────────

celery_app = Celery(
    "tubehub",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    task_ignore_result=True,
    task_always_eager=settings.celery_task_always_eager,
    task_default_queue="default",
    task_routes={
        "tubehub.workers.tasks.send_email_task": {"queue": "mail"},
        "tubehub.workers.tasks.remove_asset_task": {"queue": "storage"},
    },
)


# ── Helpers ──────────────────────────────────────────────────────────────

def enqueue(task, *args) -> None:
    """Hand work to the worker; a broker outage is logged, never raised."""
    try:
        task.delay(*args)
    except Exception as e:
        logger.error(f"Could not enqueue {task.name}{args}: {e}")


# ── Tasks ────────────────────────────────────────────────────────────────

@celery_app.task(
    name="tubehub.workers.tasks.send_email_task",
    bind=True,
    max_retries=3,
    default_retry_delay=30,
)
def send_email_task(self, to: str, subject: str, html: str):
    """Deliver one email over SMTP."""
    from tubehub.services.notifications.email_service import OutgoingEmail, email_service
    try:
        email_service.send(OutgoingEmail(to=to, subject=subject, html=html))
    except Exception as exc:
        logger.error(f"Error sending email to {to}: {exc}")
        if not self.request.called_directly and not celery_app.conf.task_always_eager:
            raise self.retry(exc=exc, countdown=30 * (2 ** self.request.retries))


@celery_app.task(name="tubehub.workers.tasks.remove_asset_task")
def remove_asset_task(public_id: str, kind: str = "image"):
    """Delete a remote object; missing objects are not an error."""
    from tubehub.models.models import AssetKind
    from tubehub.services.media.storage_service import storage_service
    storage_service.remove(public_id, AssetKind(kind))


def send_email(message) -> None:
    enqueue(send_email_task, message.to, message.subject, message.html)


def remove_asset(public_id, kind) -> None:
    if public_id:
        enqueue(remove_asset_task, public_id, getattr(kind, "value", kind))
