"""Server-sent toast events for the signed-in user."""
import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from hocnhac.api.deps import get_current_actor
from hocnhac.core.events import events
from hocnhac.schemas.identity import Actor

router = APIRouter(prefix="/events", tags=["events"])

KEEPALIVE_SECONDS = 15.0


@router.get("")
async def stream_events(
    request: Request,
    current_actor: Actor = Depends(get_current_actor),
):
    async def event_stream():
        async with events.subscribe(current_actor.id) as sub:
            while not await request.is_disconnected():
                try:
                    event = await sub.get(timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield f"event: toast\ndata: {event.model_dump_json()}\n\n"

    return StreamingResponse(event_stream(), media_type="text/event-stream")
