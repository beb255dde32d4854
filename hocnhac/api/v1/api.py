"""V1 API router aggregation."""
from fastapi import APIRouter

from hocnhac.api.v1.endpoints import comments, events, notifications

api_router = APIRouter(prefix="/v1")
api_router.include_router(comments.router)
api_router.include_router(notifications.router)
api_router.include_router(events.router)
