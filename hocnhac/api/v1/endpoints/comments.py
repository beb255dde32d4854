"""Song comments: threads, replies, edits, deletes and likes."""
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hocnhac.api.deps import get_current_actor, get_current_actor_optional, get_current_admin, get_db
from hocnhac.core.errors import AppError, StoreErrorKind, TransientStoreError
from hocnhac.core.events import ToastType, events
from hocnhac.models.comment import Comment
from hocnhac.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentThreadResponse,
    CommentUpdate,
    LikeToggleResponse,
)
from hocnhac.schemas.identity import Actor
from hocnhac.services import comment_service, thread_service

router = APIRouter(tags=["comments"])


@contextmanager
def toast_errors(actor: Actor, message: str, denied_message: str | None = None) -> Iterator[None]:
    """Publish an error toast to the actor for a failed primary action, then re-raise."""
    try:
        yield
    except TransientStoreError as e:
        if denied_message and e.store_kind is StoreErrorKind.PERMISSION_DENIED:
            events.publish(actor.id, denied_message, ToastType.ERROR)
        else:
            events.publish(actor.id, message, ToastType.ERROR)
        raise
    except AppError:
        events.publish(actor.id, message, ToastType.ERROR)
        raise
    except HTTPException as e:
        events.publish(actor.id, str(e.detail), ToastType.ERROR)
        raise


def comment_to_response(comment: Comment, viewer_id: str | None = None) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        song_id=comment.song_id,
        user_id=comment.user_id,
        user_name=comment.user_name,
        user_avatar=comment.user_avatar,
        content=comment.content,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        parent_id=comment.parent_id,
        likes=comment.likes or 0,
        liked_by=list(comment.liked_by or []),
        is_liked=thread_service.liked_by(comment, viewer_id),
    )


def _can_delete(actor: Actor, comment: Comment) -> bool:
    return actor.id == comment.user_id or actor.is_admin


@router.get("/songs/{song_id}/comments", response_model=list[CommentThreadResponse])
async def list_song_comments(
    song_id: str,
    current_actor: Actor | None = Depends(get_current_actor_optional),
    db: AsyncSession = Depends(get_db),
):
    comments = await comment_service.list_comments_for_song(db, song_id)
    viewer_id = current_actor.id if current_actor else None
    return [
        CommentThreadResponse(
            **comment_to_response(t.comment, viewer_id).model_dump(),
            replies=[comment_to_response(r, viewer_id) for r in t.replies],
        )
        for t in thread_service.assemble(comments)
    ]


@router.post("/songs/{song_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_song_comment(
    song_id: str,
    data: CommentCreate,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    is_reply = bool(data.parent_id)
    error_message = "Có lỗi xảy ra khi trả lời!" if is_reply else "Có lỗi xảy ra khi đăng bình luận!"
    denied_message = "Bạn không có quyền trả lời bình luận" if is_reply else "Bạn không có quyền đăng bình luận"
    with toast_errors(current_actor, error_message, denied_message):
        comment = await comment_service.post_comment(
            db, song_id, current_actor, data.content, parent_id=data.parent_id
        )
    events.publish(
        current_actor.id,
        "Trả lời thành công!" if is_reply else "Đăng bình luận thành công!",
        ToastType.SUCCESS,
    )
    return comment_to_response(comment, current_actor.id)


@router.delete("/songs/{song_id}/comments")
async def purge_song_comments(
    song_id: str,
    current_actor: Actor = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    deleted = await comment_service.delete_comments_for_song(db, song_id)
    return {"deleted": deleted}


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    with toast_errors(current_actor, "Có lỗi xảy ra khi cập nhật bình luận!"):
        comment = await comment_service.get_comment(db, comment_id)
        if comment.user_id != current_actor.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Bạn chỉ có thể sửa bình luận của mình")
        comment = await comment_service.edit_comment(db, comment_id, data.content)
    events.publish(current_actor.id, "Cập nhật bình luận thành công!", ToastType.SUCCESS)
    return comment_to_response(comment, current_actor.id)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    with toast_errors(current_actor, "Có lỗi xảy ra khi xóa bình luận!"):
        comment = await comment_service.get_comment(db, comment_id)
        if not _can_delete(current_actor, comment):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Bạn không có quyền xóa bình luận này")
        await comment_service.delete_comment(db, comment_id)
    events.publish(current_actor.id, "Xóa bình luận thành công!", ToastType.SUCCESS)
    return None


@router.post("/comments/{comment_id}/like", response_model=LikeToggleResponse)
async def toggle_comment_like(
    comment_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    with toast_errors(current_actor, "Có lỗi xảy ra khi thích bình luận", "Bạn không có quyền thích bình luận"):
        result = await comment_service.like_comment(db, comment_id, current_actor)
    return LikeToggleResponse(liked=result.liked, likes=result.new_like_count)
