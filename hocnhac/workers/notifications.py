"""Celery tasks for push notifications."""
import logging

from hocnhac.core.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task
def send_push_notification(user_id: str, title: str, body: str) -> None:
    # Placeholder: FCM/web push
    logger.debug("Push to %s: %s - %s", user_id, title, body)
