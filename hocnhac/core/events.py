"""Per-user toast event channel.

Endpoints publish short user-facing messages; connected clients consume them
through a bounded queue owned by their subscription. A subscription is
registered on ``__aenter__`` and removed on ``__aexit__``.
"""
import asyncio
import enum
import logging
from collections import defaultdict
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, Field

from hocnhac.core.config import settings

logger = logging.getLogger(__name__)


class ToastType(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class ToastEvent(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    message: str
    type: ToastType = ToastType.INFO
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Subscription:
    def __init__(self, channel: "EventChannel", user_id: str, maxsize: int):
        self.channel = channel
        self.user_id = user_id
        self.queue: asyncio.Queue[ToastEvent] = asyncio.Queue(maxsize=maxsize)

    def offer(self, event: ToastEvent) -> None:
        """Enqueue without blocking, dropping the oldest event when full."""
        if self.queue.full():
            try:
                self.queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
        self.queue.put_nowait(event)

    async def get(self, timeout: float | None = None) -> ToastEvent:
        if timeout is None:
            return await self.queue.get()
        return await asyncio.wait_for(self.queue.get(), timeout)

    async def __aenter__(self) -> "Subscription":
        self.channel._register(self)
        return self

    async def __aexit__(self, *exc) -> None:
        self.channel._unregister(self)


class EventChannel:
    def __init__(self, maxsize: int | None = None):
        self.maxsize = maxsize or settings.EVENT_QUEUE_SIZE
        self._subscriptions: dict[str, set[Subscription]] = defaultdict(set)

    def subscribe(self, user_id: str, maxsize: int | None = None) -> Subscription:
        return Subscription(self, user_id, maxsize or self.maxsize)

    def publish(self, user_id: str, message: str, toast_type: ToastType = ToastType.INFO) -> ToastEvent:
        event = ToastEvent(message=message, type=toast_type)
        for sub in list(self._subscriptions.get(user_id, ())):
            sub.offer(event)
        return event

    def subscriber_count(self, user_id: str) -> int:
        return len(self._subscriptions.get(user_id, ()))

    def _register(self, sub: Subscription) -> None:
        self._subscriptions[sub.user_id].add(sub)
        logger.debug("Subscribed %s (%d live)", sub.user_id, self.subscriber_count(sub.user_id))

    def _unregister(self, sub: Subscription) -> None:
        subs = self._subscriptions.get(sub.user_id)
        if not subs:
            return
        subs.discard(sub)
        if not subs:
            del self._subscriptions[sub.user_id]


events = EventChannel()
