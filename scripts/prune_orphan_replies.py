"""Delete replies whose top-level comment no longer exists.

Comments deleted before replies were removed together with their parent
left such replies behind; they never render.
"""
import asyncio
import sys

from sqlalchemy import delete, select

from hocnhac.db.session import async_session_maker
from hocnhac.models.comment import Comment
from hocnhac.services.thread_service import orphans


async def prune(dry_run: bool = True) -> int:
    async with async_session_maker() as db:
        result = await db.execute(select(Comment))
        found = orphans(result.scalars().all())
        if not found:
            print("No orphan replies found.")
            return 0
        for c in found:
            print(f"  - {c.id} song={c.song_id} parent={c.parent_id} by {c.user_name}")
        if dry_run:
            print(f"\n{len(found)} orphan replies (dry run, pass --apply to delete)")
            return len(found)
        await db.execute(delete(Comment).where(Comment.id.in_([c.id for c in found])))
        await db.commit()
        print(f"\nDeleted {len(found)} orphan replies.")
        return len(found)


if __name__ == "__main__":
    asyncio.run(prune(dry_run="--apply" not in sys.argv))
