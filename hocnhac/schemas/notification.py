"""Pydantic schemas for Notification."""
from typing import Literal

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    type: Literal["reply", "like"]
    song_id: str
    comment_id: str
    from_user_id: str
    from_user_name: str
    from_user_avatar: str | None = None
    content: str | None = None
    read: bool = False
    created_at: int

    model_config = {"from_attributes": True}
