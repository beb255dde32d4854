"""Pydantic schemas for Comment."""
from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)
    parent_id: str | None = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    id: str
    song_id: str
    user_id: str
    user_name: str
    user_avatar: str | None = None
    content: str
    created_at: int
    updated_at: int | None = None
    parent_id: str | None = None
    likes: int = 0
    liked_by: list[str] = []
    is_liked: bool = False

    model_config = {"from_attributes": True}


class CommentThreadResponse(CommentResponse):
    replies: list[CommentResponse] = []


class LikeToggleResponse(BaseModel):
    liked: bool
    likes: int
