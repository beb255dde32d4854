"""Report comments whose like counter disagrees with their liker set."""
import asyncio

from sqlalchemy import select

from hocnhac.db.session import async_session_maker
from hocnhac.models.comment import Comment


async def check_likes(fix: bool = False) -> int:
    async with async_session_maker() as db:
        result = await db.execute(select(Comment))
        comments = result.scalars().all()
        total_likes = sum(c.likes or 0 for c in comments)
        print(f"Total comments: {len(comments)}, total likes: {total_likes}")

        mismatched = [c for c in comments if (c.likes or 0) != len(set(c.liked_by or []))]
        if not mismatched:
            print("\nAll like counters match their liker sets.")
            return 0

        print("\nMismatched comments:")
        for c in mismatched:
            preview = (c.content[:30] + "...") if len(c.content) > 30 else c.content
            print(f"  - {c.id} ({c.user_name}): likes={c.likes} liked_by={len(c.liked_by or [])} {preview!r}")
            if fix:
                c.liked_by = list(dict.fromkeys(c.liked_by or []))
                c.likes = len(c.liked_by)
        if fix:
            await db.commit()
            print(f"\nFixed {len(mismatched)} comment(s).")
        return len(mismatched)


if __name__ == "__main__":
    import sys

    asyncio.run(check_likes(fix="--fix" in sys.argv))
