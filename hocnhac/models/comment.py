"""Comment model: top-level comments and one level of replies on a song."""
import time
import uuid

from sqlalchemy import JSON, BigInteger, Column, Index, Integer, String, Text

from hocnhac.db.session import Base


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_song_id_created_at", "song_id", "created_at"),)

    id = Column(String(64), primary_key=True, default=new_id)
    song_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_avatar = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms)  # epoch ms
    updated_at = Column(BigInteger, nullable=True)
    parent_id = Column(String(64), nullable=True, index=True)  # None => top-level
    likes = Column(Integer, nullable=False, default=0)
    liked_by = Column(JSON, nullable=False, default=list)
