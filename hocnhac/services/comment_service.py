"""Comment persistence and the comment/reply/like workflows."""
import logging
from dataclasses import dataclass

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hocnhac.core.config import settings
from hocnhac.core.errors import NotFoundError, StoreErrorKind, TransientStoreError, ValidationError, store_errors
from hocnhac.models.comment import Comment, now_ms
from hocnhac.schemas.identity import Actor
from hocnhac.services import notification_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeToggleResult:
    liked: bool
    new_like_count: int


def _clean(value: str | None) -> str:
    return (value or "").strip()


def sort_newest_first(comments: list[Comment]) -> list[Comment]:
    """Order used by both listing paths: created_at desc, then id desc."""
    return sorted(comments, key=lambda c: (c.created_at or 0, c.id), reverse=True)


async def create_comment(
    db: AsyncSession,
    song_id: str,
    user_id: str,
    user_name: str,
    user_avatar: str | None,
    content: str,
    parent_id: str | None = None,
) -> str:
    """Store a new comment and return its id. ``parent_id`` is stored as given."""
    song_id, user_id, user_name, content = (_clean(v) for v in (song_id, user_id, user_name, content))
    if not (song_id and user_id and user_name and content):
        raise ValidationError("Missing required fields for comment")
    comment = Comment(
        song_id=song_id,
        user_id=user_id,
        user_name=user_name,
        user_avatar=_clean(user_avatar) or None,
        content=content,
        created_at=now_ms(),
        parent_id=_clean(parent_id) or None,
        likes=0,
        liked_by=[],
    )
    with store_errors():
        db.add(comment)
        await db.flush()
    return comment.id


async def get_comment(db: AsyncSession, comment_id: str) -> Comment:
    with store_errors():
        comment = await db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


async def list_comments_for_song(
    db: AsyncSession,
    song_id: str,
    *,
    server_order: bool | None = None,
) -> list[Comment]:
    """All comments (replies included) of a song, most recent first."""
    if server_order is None:
        server_order = settings.COMMENTS_SERVER_ORDER
    if server_order:
        try:
            with store_errors():
                result = await db.execute(
                    select(Comment)
                    .where(Comment.song_id == song_id)
                    .order_by(desc(Comment.created_at), desc(Comment.id))
                )
                return list(result.scalars().all())
        except TransientStoreError as e:
            if e.store_kind is not StoreErrorKind.FAILED_PRECONDITION:
                raise
            logger.warning("Ordered comment query unavailable for song %s, sorting in memory", song_id)
            await db.rollback()
    with store_errors():
        result = await db.execute(select(Comment).where(Comment.song_id == song_id))
        comments = list(result.scalars().all())
    return sort_newest_first(comments)


async def edit_comment(db: AsyncSession, comment_id: str, new_content: str) -> Comment:
    """Replace the content and stamp ``updated_at``. Authorship is the caller's concern."""
    content = _clean(new_content)
    if not content:
        raise ValidationError("Comment content must not be empty")
    comment = await get_comment(db, comment_id)
    comment.content = content
    comment.updated_at = now_ms()
    with store_errors():
        await db.flush()
    return comment


async def delete_comment(db: AsyncSession, comment_id: str) -> int:
    """Delete a comment together with its replies. Returns the number of comments removed."""
    comment = await get_comment(db, comment_id)
    removed = 0
    with store_errors():
        if not comment.parent_id:
            result = await db.execute(delete(Comment).where(Comment.parent_id == comment.id))
            removed += result.rowcount or 0
        await db.delete(comment)
        await db.flush()
    return removed + 1


async def delete_comments_for_song(db: AsyncSession, song_id: str) -> int:
    """Remove every comment of a song, used when the song itself is removed."""
    with store_errors():
        result = await db.execute(delete(Comment).where(Comment.song_id == song_id))
        await db.flush()
    return result.rowcount or 0


async def toggle_like(db: AsyncSession, comment_id: str, user_id: str) -> LikeToggleResult:
    """Add or remove ``user_id`` from the liker set.

    The row is locked for the rest of the transaction so concurrent toggles
    serialize instead of both reading the same liker set.
    """
    with store_errors():
        result = await db.execute(
            select(Comment).where(Comment.id == comment_id).with_for_update()
        )
        comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    liked_by = list(comment.liked_by or [])
    if user_id in liked_by:
        comment.liked_by = [uid for uid in liked_by if uid != user_id]
        comment.likes = max(0, (comment.likes or 0) - 1)
        liked = False
    else:
        comment.liked_by = liked_by + [user_id]
        comment.likes = (comment.likes or 0) + 1
        liked = True
    with store_errors():
        await db.flush()
    return LikeToggleResult(liked=liked, new_like_count=comment.likes)


async def count_comments(db: AsyncSession, song_id: str) -> int:
    with store_errors():
        return await db.scalar(select(func.count(Comment.id)).where(Comment.song_id == song_id)) or 0


async def _resolve_parent(db: AsyncSession, song_id: str, parent_id: str) -> tuple[Comment, Comment]:
    """Return (comment replied to, top-level comment the reply is attached to)."""
    parent = await get_comment(db, parent_id)
    if parent.song_id != song_id:
        raise ValidationError("Parent comment belongs to another song")
    if not parent.parent_id:
        return parent, parent
    # Replies are one level deep: a reply to a reply joins the top-level thread.
    try:
        root = await get_comment(db, parent.parent_id)
    except NotFoundError:
        raise NotFoundError("Parent comment not found") from None
    return parent, root


async def post_comment(
    db: AsyncSession,
    song_id: str,
    actor: Actor,
    content: str,
    parent_id: str | None = None,
) -> Comment:
    """Create a comment or reply, commit it, then notify the replied-to author."""
    addressed = root = None
    if _clean(parent_id):
        addressed, root = await _resolve_parent(db, _clean(song_id), _clean(parent_id))
    comment_id = await create_comment(
        db,
        song_id,
        actor.id,
        actor.name,
        actor.avatar_url,
        content,
        parent_id=root.id if root else None,
    )
    with store_errors():
        await db.commit()
    comment = await get_comment(db, comment_id)
    if addressed is not None:
        await notification_service.notify_reply(addressed, comment.content, actor)
    return comment


async def like_comment(db: AsyncSession, comment_id: str, actor: Actor) -> LikeToggleResult:
    """Toggle the actor's like, commit, and notify the author on a new like only."""
    result = await toggle_like(db, comment_id, actor.id)
    with store_errors():
        await db.commit()
    if result.liked:
        comment = await get_comment(db, comment_id)
        await notification_service.notify_like(comment, actor)
    return result
