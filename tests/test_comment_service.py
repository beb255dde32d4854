import pytest
from sqlalchemy import select

from hocnhac.core.errors import NotFoundError, StoreErrorKind, TransientStoreError, ValidationError
from hocnhac.models.comment import Comment
from hocnhac.services import comment_service


async def _add(db, comment_id, created_at, song_id="s1", parent_id=None, user_id="u1"):
    db.add(
        Comment(
            id=comment_id,
            song_id=song_id,
            user_id=user_id,
            user_name="Alice",
            content=f"comment {comment_id}",
            created_at=created_at,
            parent_id=parent_id,
            likes=0,
            liked_by=[],
        )
    )


async def test_create_then_list_returns_fresh_comment(db):
    comment_id = await comment_service.create_comment(db, "s1", "u1", "Alice", None, "Hello")
    await db.commit()

    comments = await comment_service.list_comments_for_song(db, "s1")

    assert [c.id for c in comments] == [comment_id]
    comment = comments[0]
    assert comment.likes == 0
    assert comment.liked_by == []
    assert comment.parent_id is None
    assert comment.content == "Hello"
    assert comment.updated_at is None


async def test_create_trims_fields(db):
    comment_id = await comment_service.create_comment(
        db, " s1 ", " u1 ", "  Alice ", "  https://a.png ", "  Xin chào  ", parent_id="  "
    )
    comment = await comment_service.get_comment(db, comment_id)
    assert (comment.song_id, comment.user_id, comment.user_name) == ("s1", "u1", "Alice")
    assert comment.user_avatar == "https://a.png"
    assert comment.content == "Xin chào"
    assert comment.parent_id is None


@pytest.mark.parametrize(
    "song_id,user_id,user_name,content",
    [
        ("", "u1", "Alice", "Hello"),
        ("s1", "   ", "Alice", "Hello"),
        ("s1", "u1", "", "Hello"),
        ("s1", "u1", "Alice", "   "),
    ],
)
async def test_create_rejects_missing_fields(db, song_id, user_id, user_name, content):
    with pytest.raises(ValidationError):
        await comment_service.create_comment(db, song_id, user_id, user_name, None, content)
    result = await db.execute(select(Comment))
    assert result.scalars().all() == []


async def test_create_stores_parent_id_verbatim(db):
    comment_id = await comment_service.create_comment(db, "s1", "u1", "Alice", None, "reply", parent_id="missing")
    comment = await comment_service.get_comment(db, comment_id)
    assert comment.parent_id == "missing"


async def test_list_is_newest_first_and_scoped_to_song(db):
    await _add(db, "a", 1000)
    await _add(db, "b", 3000)
    await _add(db, "c", 2000)
    await _add(db, "other", 5000, song_id="s2")
    await db.commit()

    comments = await comment_service.list_comments_for_song(db, "s1")
    assert [c.id for c in comments] == ["b", "c", "a"]


async def test_in_memory_sort_matches_ordered_query(db):
    for comment_id, created_at in [("a", 1000), ("d", 2000), ("b", 2000), ("c", 500), ("e", 2000)]:
        await _add(db, comment_id, created_at)
    await db.commit()

    ordered = await comment_service.list_comments_for_song(db, "s1", server_order=True)
    fallback = await comment_service.list_comments_for_song(db, "s1", server_order=False)

    assert [c.id for c in ordered] == [c.id for c in fallback] == ["e", "d", "b", "a", "c"]


async def test_list_falls_back_when_ordered_query_is_unavailable(db, monkeypatch):
    await _add(db, "a", 1000)
    await _add(db, "b", 2000)
    await db.commit()

    original = db.execute
    calls = []

    async def flaky(statement, *args, **kwargs):
        calls.append(statement)
        if len(calls) == 1:
            raise TransientStoreError("index missing", StoreErrorKind.FAILED_PRECONDITION)
        return await original(statement, *args, **kwargs)

    monkeypatch.setattr(db, "execute", flaky)
    comments = await comment_service.list_comments_for_song(db, "s1", server_order=True)

    assert [c.id for c in comments] == ["b", "a"]
    assert len(calls) == 2


async def test_list_propagates_other_store_errors(db, monkeypatch):
    async def broken(statement, *args, **kwargs):
        raise TransientStoreError("down", StoreErrorKind.UNAVAILABLE)

    monkeypatch.setattr(db, "execute", broken)
    with pytest.raises(TransientStoreError) as exc_info:
        await comment_service.list_comments_for_song(db, "s1")
    assert exc_info.value.store_kind is StoreErrorKind.UNAVAILABLE


async def test_edit_sets_content_and_updated_at(db):
    comment_id = await comment_service.create_comment(db, "s1", "u1", "Alice", None, "Hello")
    comment = await comment_service.edit_comment(db, comment_id, "  Hello again ")
    assert comment.content == "Hello again"
    assert comment.updated_at is not None
    assert comment.updated_at >= comment.created_at


async def test_edit_missing_comment(db):
    with pytest.raises(NotFoundError):
        await comment_service.edit_comment(db, "nope", "text")


async def test_edit_rejects_blank_content(db):
    comment_id = await comment_service.create_comment(db, "s1", "u1", "Alice", None, "Hello")
    with pytest.raises(ValidationError):
        await comment_service.edit_comment(db, comment_id, "   ")


async def test_delete_top_level_removes_its_replies(db):
    await _add(db, "top", 1000)
    await _add(db, "r1", 2000, parent_id="top")
    await _add(db, "r2", 3000, parent_id="top")
    await _add(db, "other", 4000)
    await db.commit()

    removed = await comment_service.delete_comment(db, "top")
    await db.commit()

    assert removed == 3
    remaining = await comment_service.list_comments_for_song(db, "s1")
    assert [c.id for c in remaining] == ["other"]


async def test_delete_reply_keeps_parent(db):
    await _add(db, "top", 1000)
    await _add(db, "r1", 2000, parent_id="top")
    await db.commit()

    assert await comment_service.delete_comment(db, "r1") == 1
    await db.commit()
    remaining = await comment_service.list_comments_for_song(db, "s1")
    assert [c.id for c in remaining] == ["top"]


async def test_delete_missing_comment(db):
    with pytest.raises(NotFoundError):
        await comment_service.delete_comment(db, "nope")


async def test_delete_comments_for_song(db):
    await _add(db, "a", 1000)
    await _add(db, "b", 2000, parent_id="a")
    await _add(db, "c", 3000, song_id="s2")
    await db.commit()

    assert await comment_service.delete_comments_for_song(db, "s1") == 2
    await db.commit()
    assert await comment_service.count_comments(db, "s1") == 0
    assert await comment_service.count_comments(db, "s2") == 1


async def test_toggle_like_then_unlike(db):
    comment_id = await comment_service.create_comment(db, "s1", "u1", "Alice", None, "Hello")

    first = await comment_service.toggle_like(db, comment_id, "u2")
    assert first == comment_service.LikeToggleResult(liked=True, new_like_count=1)

    second = await comment_service.toggle_like(db, comment_id, "u2")
    assert second == comment_service.LikeToggleResult(liked=False, new_like_count=0)


async def test_toggle_like_pair_restores_existing_state(db):
    db.add(
        Comment(
            id="c1", song_id="s1", user_id="u1", user_name="Alice", content="Hi",
            created_at=1, likes=2, liked_by=["u3", "u4"],
        )
    )
    await db.commit()

    await comment_service.toggle_like(db, "c1", "u2")
    await comment_service.toggle_like(db, "c1", "u2")
    await db.commit()

    comment = await comment_service.get_comment(db, "c1")
    assert comment.likes == 2
    assert sorted(comment.liked_by) == ["u3", "u4"]


async def test_unlike_never_goes_negative(db):
    db.add(
        Comment(
            id="c1", song_id="s1", user_id="u1", user_name="Alice", content="Hi",
            created_at=1, likes=0, liked_by=["u2"],
        )
    )
    await db.commit()

    result = await comment_service.toggle_like(db, "c1", "u2")
    assert result == comment_service.LikeToggleResult(liked=False, new_like_count=0)


async def test_toggle_like_missing_comment(db):
    with pytest.raises(NotFoundError):
        await comment_service.toggle_like(db, "nope", "u2")
