from hocnhac.models.comment import Comment
from hocnhac.models.notification import Notification

__all__ = ["Comment", "Notification"]
