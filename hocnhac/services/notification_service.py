"""Notification creation and queries.

``notify_reply`` and ``notify_like`` run after the triggering comment write
has been committed. They use their own session and never raise: a failed
notification is logged and dropped, the reply or like stands.
"""
import logging

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hocnhac.core.config import settings
from hocnhac.core.errors import ValidationError, store_errors
from hocnhac.db.session import async_session_maker
from hocnhac.models.comment import Comment, now_ms
from hocnhac.models.notification import NOTIFICATION_TYPES, Notification
from hocnhac.schemas.identity import Actor

logger = logging.getLogger(__name__)

PUSH_TITLES = {
    "reply": "{name} đã trả lời bình luận của bạn",
    "like": "{name} đã thích bình luận của bạn",
}


def preview(text: str | None, length: int | None = None) -> str | None:
    if not text:
        return None
    return text[: length or settings.NOTIFICATION_PREVIEW_LENGTH]


async def create_notification(
    db: AsyncSession,
    *,
    user_id: str,
    notification_type: str,
    song_id: str,
    comment_id: str,
    actor: Actor,
    content: str | None = None,
) -> Notification | None:
    """Create a notification. Skips if actor is the same as user (no self-notify)."""
    if user_id == actor.id:
        return None
    if notification_type not in NOTIFICATION_TYPES:
        raise ValidationError(f"Unknown notification type: {notification_type}")
    notification = Notification(
        user_id=user_id,
        type=notification_type,
        song_id=song_id,
        comment_id=comment_id,
        from_user_id=actor.id,
        from_user_name=actor.name,
        from_user_avatar=actor.avatar_url or None,
        content=content or None,
        read=False,
        created_at=now_ms(),
    )
    with store_errors():
        db.add(notification)
        await db.flush()
    return notification


def push(notification: Notification) -> None:
    """Queue the device push for a stored notification. Never raises."""
    from hocnhac.workers.notifications import send_push_notification

    title = PUSH_TITLES[notification.type].format(name=notification.from_user_name)
    try:
        send_push_notification.delay(notification.user_id, title, notification.content or "")
    except Exception:
        logger.exception("Error queueing push for notification %s", notification.id)


async def _emit(**kwargs) -> Notification | None:
    try:
        async with async_session_maker() as session:
            notification = await create_notification(session, **kwargs)
            await session.commit()
    except Exception:
        logger.exception(
            "Error creating %s notification for comment %s",
            kwargs.get("notification_type"),
            kwargs.get("comment_id"),
        )
        return None
    if notification is not None:
        push(notification)
    return notification


async def notify_reply(parent_comment: Comment, reply_content: str, actor: Actor) -> Notification | None:
    """Tell the author of ``parent_comment`` that ``actor`` replied."""
    if parent_comment.user_id == actor.id:
        return None
    return await _emit(
        user_id=parent_comment.user_id,
        notification_type="reply",
        song_id=parent_comment.song_id,
        comment_id=parent_comment.id,
        actor=actor,
        content=preview(reply_content),
    )


async def notify_like(comment: Comment, actor: Actor) -> Notification | None:
    """Tell the author of ``comment`` that ``actor`` liked it. Call on new likes only."""
    if comment.user_id == actor.id:
        return None
    return await _emit(
        user_id=comment.user_id,
        notification_type="like",
        song_id=comment.song_id,
        comment_id=comment.id,
        actor=actor,
        content=preview(comment.content),
    )


async def get_notifications(
    db: AsyncSession,
    user_id: str,
    *,
    limit: int | None = None,
) -> list[Notification]:
    """Get notifications for user, most recent first."""
    with store_errors():
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(desc(Notification.created_at), desc(Notification.id))
            .limit(limit or settings.NOTIFICATION_PAGE_SIZE)
        )
    return list(result.scalars().all())


async def get_unread_count(db: AsyncSession, user_id: str) -> int:
    """Get count of unread notifications."""
    with store_errors():
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read == False,  # noqa: E712
            )
        )
    return result.scalar() or 0


async def mark_all_read(db: AsyncSession, user_id: str) -> int:
    """Mark all notifications as read. Returns count updated."""
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
        .values(read=True)
    )
    with store_errors():
        result = await db.execute(stmt)
    return result.rowcount or 0


async def mark_one_read(db: AsyncSession, user_id: str, notification_id: str) -> bool:
    """Mark a single notification as read. Returns True if updated."""
    stmt = (
        update(Notification)
        .where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
            Notification.read == False,  # noqa: E712
        )
        .values(read=True)
    )
    with store_errors():
        result = await db.execute(stmt)
    return (result.rowcount or 0) > 0
