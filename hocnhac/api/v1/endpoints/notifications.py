"""Notifications API."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hocnhac.api.deps import get_current_actor, get_db
from hocnhac.core.config import settings
from hocnhac.schemas.identity import Actor
from hocnhac.schemas.notification import NotificationResponse
from hocnhac.services.notification_service import (
    get_notifications,
    get_unread_count,
    mark_all_read,
    mark_one_read,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    limit: int = Query(settings.NOTIFICATION_PAGE_SIZE, ge=1, le=100),
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    rows = await get_notifications(db, current_actor.id, limit=limit)
    return [NotificationResponse.model_validate(n) for n in rows]


@router.get("/unread-count")
async def unread_count(
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    count = await get_unread_count(db, current_actor.id)
    return {"count": count}


@router.post("/mark-all-read")
async def mark_all_as_read(
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    updated = await mark_all_read(db, current_actor.id)
    return {"updated": updated}


@router.patch("/{notification_id}/read")
async def mark_one_as_read(
    notification_id: str,
    current_actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    updated = await mark_one_read(db, current_actor.id, notification_id)
    return {"updated": updated}
