"""Notification model for replies and likes on comments."""
from sqlalchemy import BigInteger, Boolean, Column, Index, String, Text

from hocnhac.db.session import Base
from hocnhac.models.comment import new_id, now_ms

NOTIFICATION_TYPES = ("reply", "like")


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_id_read", "user_id", "read"),)

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(128), nullable=False, index=True)  # recipient
    type = Column(String(20), nullable=False)  # reply, like
    song_id = Column(String(64), nullable=False)
    comment_id = Column(String(64), nullable=False)
    from_user_id = Column(String(128), nullable=False)
    from_user_name = Column(String(255), nullable=False)
    from_user_avatar = Column(Text, nullable=True)
    content = Column(Text, nullable=True)  # preview
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)
