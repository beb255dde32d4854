from hocnhac.schemas.identity import Actor
from hocnhac.schemas.comment import (
    CommentCreate,
    CommentUpdate,
    CommentResponse,
    CommentThreadResponse,
    LikeToggleResponse,
)
from hocnhac.schemas.notification import NotificationResponse
