import json

from hocnhac.api.v1.endpoints import events as events_endpoint
from hocnhac.core.events import ToastType, events


class ConnectedRequest:
    async def is_disconnected(self) -> bool:
        return False


async def test_stream_sends_keepalive_then_toast_and_unsubscribes_on_close(alice, monkeypatch):
    monkeypatch.setattr(events_endpoint, "KEEPALIVE_SECONDS", 0.01)
    response = await events_endpoint.stream_events(request=ConnectedRequest(), current_actor=alice)
    assert response.media_type == "text/event-stream"
    body = response.body_iterator

    assert await body.__anext__() == ": keepalive\n\n"
    assert events.subscriber_count(alice.id) == 1

    published = events.publish(alice.id, "Đăng bình luận thành công!", ToastType.SUCCESS)
    frame = await body.__anext__()
    await body.aclose()

    assert frame.startswith("event: toast\ndata: ")
    assert frame.endswith("\n\n")
    payload = json.loads(frame[len("event: toast\ndata: "):].strip())
    assert payload["id"] == published.id
    assert payload["message"] == "Đăng bình luận thành công!"
    assert payload["type"] == "success"
    assert events.subscriber_count(alice.id) == 0
