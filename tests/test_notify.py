"""Tests for mockcms.notify."""

import json

from mockcms.content.models import NotificationEvent
from mockcms.notify import NotificationMessage, Notifier


class TestNotifier:
    def test_message_shape(self):
        received: list[NotificationMessage] = []
        notifier = Notifier(received.append)

        message = notifier.send("article", "abc", NotificationEvent.PUBLISHED)

        assert received == [message]
        assert message.event == NotificationEvent.PUBLISHED
        assert json.loads(message.data) == {"event": "published", "type": "article", "id": "abc"}
        assert message.payload()["id"] == "abc"

    def test_no_sink(self):
        assert Notifier().send("article", "abc", NotificationEvent.PUBLISHED) is None

    def test_disabled(self):
        received: list[NotificationMessage] = []
        notifier = Notifier(received.append, enabled=False)
        assert notifier.send("article", "abc", NotificationEvent.UNPUBLISHED) is None
        assert received == []

    def test_failing_sink_is_logged(self, caplog):
        def explode(message: NotificationMessage) -> None:
            raise RuntimeError("sink down")

        message = Notifier(explode).send("article", "abc", NotificationEvent.UNPUBLISHED)

        assert message is not None
        assert "Notification sink failed" in caplog.text

    def test_sink_can_be_swapped(self):
        first: list[NotificationMessage] = []
        second: list[NotificationMessage] = []
        notifier = Notifier(first.append)
        notifier.sink = second.append
        notifier.send("article", "abc", NotificationEvent.PUBLISHED)
        assert first == []
        assert len(second) == 1
