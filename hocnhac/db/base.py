"""SQLAlchemy declarative base and model imports for Alembic."""
from hocnhac.db.session import Base  # noqa: F401
from hocnhac.models.comment import Comment  # noqa: F401
from hocnhac.models.notification import Notification  # noqa: F401

__all__ = ["Base", "Comment", "Notification"]
