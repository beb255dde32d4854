"""Celery application for background tasks (push notifications)."""
from celery import Celery

from hocnhac.core.config import settings

celery_app = Celery(
    "hocnhac",
    broker=settings.CELERY_BROKER_URL,
    include=["hocnhac.workers.notifications"],
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Asia/Ho_Chi_Minh",
    enable_utc=True,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_ignore_result=True,
    broker_connection_retry_on_startup=False,
)
