"""Reshape a flat comment list into top-level comments with their replies."""
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from hocnhac.models.comment import Comment


@dataclass
class CommentThread:
    comment: Comment
    replies: list[Comment] = field(default_factory=list)


def assemble(comments: Sequence[Comment]) -> list[CommentThread]:
    """Group replies under their top-level comment, keeping input order.

    Replies whose parent is not a top-level comment of ``comments`` are left out.
    """
    threads = [CommentThread(c) for c in comments if not c.parent_id]
    by_id = {t.comment.id: t for t in threads}
    for c in comments:
        if c.parent_id and c.parent_id in by_id:
            by_id[c.parent_id].replies.append(c)
    return threads


def orphans(comments: Iterable[Comment]) -> list[Comment]:
    """Replies whose parent is missing from ``comments``."""
    comments = list(comments)
    top_level = {c.id for c in comments if not c.parent_id}
    return [c for c in comments if c.parent_id and c.parent_id not in top_level]


def liked_by(comment: Comment, viewer_id: str | None) -> bool:
    if not viewer_id:
        return False
    return viewer_id in (comment.liked_by or [])
